"""Comment tree construction for hnreader."""

from hnreader.tree.forest import Forest, GapPolicy, IndentGapError, SubTree, build_forest
from hnreader.tree.nodes import (
    Ancestors,
    DuplicateIdError,
    MissingPayloadError,
    Node,
    TreeError,
    ancestors_of,
    materialize,
    walk,
)

__all__ = [
    "Ancestors",
    "DuplicateIdError",
    "Forest",
    "GapPolicy",
    "IndentGapError",
    "MissingPayloadError",
    "Node",
    "SubTree",
    "TreeError",
    "ancestors_of",
    "build_forest",
    "materialize",
    "walk",
]

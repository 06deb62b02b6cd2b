"""Build a forest from a flat, indentation-ordered sequence.

Threaded comment pages express nesting only through a numeric indent on each
row. ``build_forest`` turns the ``(indent, item)`` rows, in document order,
into ``SubTree`` nodes whose children keep the rows' relative order.

Only relative comparisons against the depth currently being filled are used,
so the first indent does not have to be 0 and missing indents may default
to 0 upstream.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, Iterable, Iterator, List, Tuple, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class GapPolicy(str, Enum):
    """What to do with a row nested deeper than the open node allows."""

    DROP = "drop"
    CLAMP = "clamp"
    REJECT = "reject"


class IndentGapError(ValueError):
    """Raised under ``GapPolicy.REJECT`` when a row skips an indent level."""

    def __init__(self, position: int, indent: int, expected: int):
        self.position = position
        self.indent = indent
        self.expected = expected
        super().__init__(
            f"Entry {position} has indent {indent}, expected at most {expected}"
        )


@dataclass
class SubTree(Generic[T]):
    """A value with its ordered, exclusively owned child subtrees."""

    value: T
    children: List["SubTree[T]"] = field(default_factory=list)


@dataclass
class Forest(Generic[T]):
    """Ordered root subtrees, i.e. everything at indent level 0."""

    roots: List[SubTree[T]] = field(default_factory=list)

    def __iter__(self) -> Iterator[Tuple[int, SubTree[T]]]:
        """Yield ``(depth, subtree)`` pairs in pre-order."""
        stack = [(0, root) for root in reversed(self.roots)]
        while stack:
            depth, subtree = stack.pop()
            yield depth, subtree
            stack.extend((depth + 1, child) for child in reversed(subtree.children))

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def values(self) -> List[T]:
        """Values of every node in pre-order."""
        return [subtree.value for _, subtree in self]


def build_forest(
    entries: Iterable[Tuple[int, T]],
    gap_policy: GapPolicy = GapPolicy.DROP,
) -> Forest[T]:
    """Convert ``(indent, item)`` rows into a forest.

    The stack holds the nodes still open for children; its length is the
    indent a row must have to become a child of the innermost one.

    - A shallower row closes open nodes until it fits, then becomes a
      sibling at that level.
    - A row at exactly the open depth is attached and opened.
    - A deeper row is a gap, handled by ``gap_policy``. Under ``DROP`` it is
      skipped, and so is the deeper run under it, since nothing at its depth
      ever gets opened.

    Args:
        entries: Rows in document order
        gap_policy: Handling of rows that skip an indent level

    Returns:
        Forest whose sibling order matches the input order

    Raises:
        IndentGapError: On a gap when ``gap_policy`` is ``REJECT``
    """
    gap_policy = GapPolicy(gap_policy)
    forest: Forest[T] = Forest()
    open_nodes: List[SubTree[T]] = []
    dropped = 0

    for position, (indent, item) in enumerate(entries):
        if indent < len(open_nodes):
            del open_nodes[indent:]
        elif indent > len(open_nodes):
            if gap_policy is GapPolicy.REJECT:
                raise IndentGapError(position, indent, len(open_nodes))
            if gap_policy is GapPolicy.DROP:
                dropped += 1
                continue

        node: SubTree[T] = SubTree(item)
        if open_nodes:
            open_nodes[-1].children.append(node)
        else:
            forest.roots.append(node)
        open_nodes.append(node)

    if dropped:
        logger.warning("Dropped %d entries nested deeper than their parent", dropped)
    return forest

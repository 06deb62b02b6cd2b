"""Attach payloads and parent back-references to a forest shape.

``materialize`` walks a ``Forest`` of IDs and builds ``Node`` objects that own
their children and point at their parent through a weak reference, so
upward walks never keep a tree alive.
"""

import logging
import weakref
from typing import (
    Generic,
    Hashable,
    Iterable,
    Iterator,
    List,
    MutableMapping,
    Optional,
    Set,
    Tuple,
    TypeVar,
)

from hnreader.tree.forest import Forest

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)
P = TypeVar("P")


class TreeError(Exception):
    """Base class for comment tree invariant violations."""


class MissingPayloadError(TreeError, LookupError):
    """A shape node's ID has no payload in the supplied store."""

    def __init__(self, key):
        self.key = key
        super().__init__(f"No payload for id {key!r}")


class DuplicateIdError(TreeError, LookupError):
    """The same ID appears more than once in a forest shape."""

    def __init__(self, key):
        self.key = key
        super().__init__(f"Id {key!r} appears more than once in the tree")


class Node(Generic[P]):
    """A payload with its children and a weak reference to its parent."""

    __slots__ = ("payload", "_children", "_parent", "__weakref__")

    def __init__(self, payload: P):
        self.payload = payload
        self._children: List["Node[P]"] = []
        self._parent: Optional["weakref.ReferenceType[Node[P]]"] = None

    def __repr__(self) -> str:
        return f"Node({self.payload!r}, children={len(self._children)})"

    @property
    def children(self) -> Tuple["Node[P]", ...]:
        return tuple(self._children)

    @property
    def parent(self) -> Optional["Node[P]"]:
        """The parent node, or None for roots and detached nodes."""
        if self._parent is None:
            return None
        return self._parent()

    @property
    def depth(self) -> int:
        return sum(1 for _ in ancestors_of(self))

    def ancestors(self) -> "Ancestors[P]":
        return ancestors_of(self)

    def _adopt(self, child: "Node[P]") -> None:
        # Parent link first, so the child is never reachable without one.
        child._parent = weakref.ref(self)
        self._children.append(child)


class Ancestors(Generic[P]):
    """Restartable iterable over a node's ancestors, nearest first."""

    def __init__(self, node: Node[P]):
        self._node = node

    def __iter__(self) -> Iterator[Node[P]]:
        current = self._node.parent
        while current is not None:
            yield current
            current = current.parent


def ancestors_of(node: Node[P]) -> Ancestors[P]:
    """Ancestors of ``node``, from its parent up to its root.

    Only parent references are followed. A root or detached node yields
    nothing.
    """
    return Ancestors(node)


def materialize(forest: Forest[K], payloads: MutableMapping[K, P]) -> List[Node[P]]:
    """Build payload nodes shaped like ``forest``.

    Each payload ends up in exactly one node. Once the whole tree is built,
    the used entries are removed from ``payloads``; entries not referenced
    by the forest are left in the mapping.

    Args:
        forest: Shape whose values are payload IDs
        payloads: ID to payload store, consumed once every node is built

    Returns:
        Root nodes in document order

    Raises:
        DuplicateIdError: An ID occurs twice in the forest
        MissingPayloadError: An ID has no payload

        On either error ``payloads`` is left untouched.
    """
    roots: List[Node[P]] = []
    seen: Set[K] = set()
    stack = [(None, subtree) for subtree in reversed(forest.roots)]

    while stack:
        parent, subtree = stack.pop()
        key = subtree.value
        if key in seen:
            raise DuplicateIdError(key)
        seen.add(key)
        try:
            payload = payloads[key]
        except KeyError:
            raise MissingPayloadError(key) from None

        node: Node[P] = Node(payload)
        if parent is None:
            roots.append(node)
        else:
            parent._adopt(node)
        stack.extend((node, child) for child in reversed(subtree.children))

    for key in seen:
        del payloads[key]
    logger.debug("Materialized %d nodes under %d roots", len(seen), len(roots))
    return roots


def walk(roots: Iterable[Node[P]]) -> Iterator[Tuple[int, Node[P]]]:
    """Yield ``(depth, node)`` pairs in pre-order, roots at depth 0."""
    stack = [(0, root) for root in reversed(list(roots))]
    while stack:
        depth, node = stack.pop()
        yield depth, node
        stack.extend((depth + 1, child) for child in reversed(node._children))

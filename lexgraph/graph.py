"""The lexer state graph: an arena of fork, rope and leaf nodes with merging."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union

from lexgraph.fork import Fork
from lexgraph.rope import Rope

_BUG = "This is a bug in the graph construction."


@dataclass(frozen=True)
class DisambiguationError:
    """Two leaves of equal priority that can match the same input."""

    a: int
    b: int


@dataclass(frozen=True)
class LeafNode:
    """A terminal node holding a token definition."""

    leaf: Any

    def cmp(self, other: LeafNode) -> int:
        """Negative, zero or positive as this leaf ranks below, equal to or above ``other``."""
        disambiguate = getattr(self.leaf, "disambiguate", None)
        if disambiguate is not None:
            return disambiguate(other.leaf)
        return (self.leaf > other.leaf) - (self.leaf < other.leaf)

    def __repr__(self) -> str:
        return repr(self.leaf)


Node = Union[Fork, Rope, LeafNode]


@dataclass(eq=False)
class ReservedId:
    """An empty slot in the graph that must be filled once with ``Graph.insert``."""

    id: int
    _consumed: bool = field(default=False, repr=False)


@dataclass
class _DeferredMerge:
    awaiting: int
    with_: int
    into: ReservedId


def _as_node(node: Any) -> Node:
    if isinstance(node, (Fork, Rope, LeafNode)):
        return node
    return LeafNode(node)


def _merge_key(a: int, b: int) -> tuple[int, int]:
    return (a, b) if a < b else (b, a)


def _shake_node(node: Node, graph: Graph, filter: list[bool]) -> None:
    shake = getattr(node, "shake", None)
    if shake is not None:
        shake(graph, filter)


def node_miss(node: Node) -> int | None:
    """The node a state falls back to when it does not match, if any."""
    if isinstance(node, Rope):
        return node.miss.first()
    if isinstance(node, Fork):
        return node.miss
    return None


def unwrap_leaf(node: Node) -> Any:
    """The token definition of a leaf node; raises TypeError for other nodes."""
    if isinstance(node, Fork):
        raise TypeError("Internal Error: called unwrap_leaf on a fork")
    if isinstance(node, Rope):
        raise TypeError("Internal Error: called unwrap_leaf on a rope")
    return node.leaf


class Graph:
    """Arena of nodes addressed by ids starting at 1, with memoised merging."""

    def __init__(self) -> None:
        # Slot 0 stays empty so ids count from 1.
        self._nodes: list[Node | None] = [None]
        self._merges: dict[tuple[int, int], int] = {}
        self._hashes: dict[int, int] = {}
        self._errors: list[DisambiguationError] = []
        self._deferred: list[_DeferredMerge] = []

    def errors(self) -> list[DisambiguationError]:
        """Disambiguation errors collected while merging."""
        return list(self._errors)

    def _next_id(self) -> int:
        return len(self._nodes)

    def reserve(self) -> ReservedId:
        """Reserve an empty slot to be filled later by ``insert``."""
        reserved = ReservedId(self._next_id())
        self._nodes.append(None)
        return reserved

    def insert(self, reserved: ReservedId, node: Any) -> int:
        """Fill a reserved slot, completing any merges that waited on it."""
        if reserved._consumed:
            raise ValueError(f"reserved id {reserved.id} has already been filled")
        reserved._consumed = True
        node_id = reserved.id
        self._nodes[node_id] = _as_node(node)

        ready = [d for d in self._deferred if d.awaiting == node_id]
        self._deferred = [d for d in self._deferred if d.awaiting != node_id]
        for deferred in ready:
            self._merge_unchecked(deferred.awaiting, deferred.with_, deferred.into)

        return node_id

    def push(self, node: Any) -> int:
        """Add a node; an identical fork or rope already pushed is reused."""
        node = _as_node(node)
        if isinstance(node, LeafNode):
            return self._push_unchecked(node)

        tag = "FORK" if isinstance(node, Fork) else "ROPE"
        key = hash((tag, node))
        existing = self._hashes.get(key)
        if existing is None:
            self._hashes[key] = self._next_id()
        else:
            current = self[existing]
            if type(current) is type(node) and current == node:
                return existing

        return self._push_unchecked(node)

    def _push_unchecked(self, node: Node) -> int:
        node_id = self._next_id()
        self._nodes.append(node)
        return node_id

    def _set_merged(self, a: int, b: int, product: int) -> None:
        self._merges[_merge_key(a, b)] = product
        self._merges[_merge_key(a, product)] = product
        self._merges[_merge_key(b, product)] = product

    def merge(self, a: int, b: int) -> int:
        """Merge nodes ``a`` and ``b`` into a node matching what either matches."""
        if a == b:
            return a

        found = self._merges.get(_merge_key(a, b))
        if found is not None:
            return found

        left, right = self.get(a), self.get(b)
        if left is None and right is None:
            raise RuntimeError(f"Merging two reserved nodes! {_BUG}")
        if left is None or right is None:
            awaiting, with_ = (a, b) if left is None else (b, a)
            reserved = self.reserve()
            self._deferred.append(_DeferredMerge(awaiting, with_, reserved))
            self._set_merged(a, b, reserved.id)
            return reserved.id
        if isinstance(left, LeafNode) and isinstance(right, LeafNode):
            order = left.cmp(right)
            if order < 0:
                return b
            if order > 0:
                return a
            self._errors.append(DisambiguationError(a, b))
            return a

        # Reserve first so that merging through a loop finds this id instead of recursing.
        reserved = self.reserve()
        self._set_merged(a, b, reserved.id)
        return self._merge_unchecked(a, b, reserved)

    def _merge_unchecked(self, a: int, b: int, reserved: ReservedId) -> int:
        left, right = self.get(a), self.get(b)
        merged_rope = None
        if isinstance(left, Rope):
            merged_rope = self._merge_rope(left, b)
        elif isinstance(right, Rope):
            merged_rope = self._merge_rope(right, a)

        if merged_rope is not None:
            return self.insert(reserved, merged_rope)

        fork = self.fork_off(a)
        fork.merge(self.fork_off(b), self)

        # Flatten chains of misses into the fork itself.
        stack = [reserved.id]
        while fork.miss is not None:
            miss = fork.miss
            if miss in stack:
                break
            stack.append(miss)

            node = self.get(miss)
            if isinstance(node, Fork):
                other = node.copy()
            elif isinstance(node, Rope):
                other = node.into_fork(self)
            else:
                break
            if other.miss is not None and self.get(other.miss) is None:
                break
            fork.miss = None
            fork.merge(other, self)

        return self.insert(reserved, fork)

    def _merge_rope(self, rope: Rope, other: int) -> Rope | None:
        node = self.get(other)
        if isinstance(node, Fork):
            if not rope.miss.is_none():
                return None
            count = 0
            for range_ in rope.pattern:
                if node.contains(range_) != other:
                    break
                count += 1
            split = rope.split_at(count, self)
            if split is None:
                return None
            split = split.miss_any(other)
            return Rope(split.pattern, self.merge(split.then, other), split.miss)
        if isinstance(node, Rope):
            common = rope.prefix(node)
            if common is None:
                return None
            prefix, miss = common
            a = rope.remainder(len(prefix), self)
            b = node.remainder(len(prefix), self)
            return Rope(prefix, self.merge(a, b), miss)
        if rope.miss.is_none():
            return rope.with_miss(other)
        return None

    def fork_off(self, id: int) -> Fork:
        """A fresh fork equivalent to node ``id``."""
        node = self.get(id)
        if isinstance(node, Fork):
            return node.copy()
        if isinstance(node, Rope):
            return node.into_fork(self)
        return Fork().with_miss(id)

    def nodes(self) -> list[Node | None]:
        """All slots, index 0 and empty slots included."""
        return list(self._nodes)

    def shake(self, root: int) -> None:
        """Drop every node that cannot be reached from ``root``."""
        filter = [False] * len(self._nodes)
        filter[root] = True
        _shake_node(self[root], self, filter)
        for node_id, referenced in enumerate(filter):
            if not referenced:
                self._nodes[node_id] = None

    def get(self, id: int) -> Node | None:
        """The node at ``id``, or None for an empty or unknown slot."""
        if 0 < id < len(self._nodes):
            return self._nodes[id]
        return None

    def __getitem__(self, id: int) -> Node:
        node = self.get(id)
        if node is None:
            raise IndexError(f"Indexing into an empty node {id}. {_BUG}")
        return node

    def __repr__(self) -> str:
        entries = ", ".join(
            f"{node_id}: {node!r}" for node_id, node in enumerate(self._nodes) if node is not None
        )
        return "{" + entries + "}"
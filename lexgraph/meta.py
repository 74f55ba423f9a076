"""Per-node facts about a lexer graph: reference counts, minimum reads and loops."""

from __future__ import annotations

from bisect import bisect_left
from dataclasses import dataclass, field
from typing import Any

from lexgraph.fork import Fork
from lexgraph.rope import Rope

_UNBOUNDED = float("inf")


@dataclass
class MetaItem:
    """What the analysis learned about one node."""

    # Number of references to this node.
    refcount: int = 0
    # Minimum number of bytes to read for this node to find a match.
    min_read: int = 0
    # Whether this node leads back into a loop entry node.
    is_loop_init: bool = False
    # Sorted ids of nodes that point to this node while it is on the stack.
    loop_entry_from: list[int] = field(default_factory=list)

    def _loop_entry(self, node_id: int) -> None:
        idx = bisect_left(self.loop_entry_from, node_id)
        if idx == len(self.loop_entry_from) or self.loop_entry_from[idx] != node_id:
            self.loop_entry_from.insert(idx, node_id)


class Meta:
    """Analysis of every node reachable from a root."""

    def __init__(self) -> None:
        self._map: dict[int, MetaItem] = {}

    @classmethod
    def analyze(cls, root: int, graph: Any) -> Meta:
        """Walk the graph from ``root`` and collect a MetaItem for each node reached."""
        meta = cls()
        meta._first_pass(root, root, graph, [])
        return meta

    def __getitem__(self, id: int) -> MetaItem:
        try:
            return self._map[id]
        except KeyError:
            raise KeyError(f"node {id} was not reached by the analysis") from None

    def __contains__(self, id: object) -> bool:
        return id in self._map

    def __len__(self) -> int:
        return len(self._map)

    def _item(self, id: int) -> MetaItem:
        return self._map.setdefault(id, MetaItem())

    def _first_pass(self, this: int, parent: int, graph: Any, stack: list[int]) -> MetaItem:
        meta = self._item(this)
        is_done = meta.refcount > 0
        meta.refcount += 1

        if this in stack:
            meta._loop_entry(parent)
            self._item(parent).is_loop_init = True
        if is_done:
            return meta

        stack.append(this)
        node = graph[this]

        if isinstance(node, Fork):
            min_read: float = _UNBOUNDED
            for _, child in node.branches():
                child_meta = self._first_pass(child, this, graph, stack)
                if child_meta.is_loop_init:
                    min_read = 1
                else:
                    min_read = min(min_read, child_meta.min_read + 1)
            if node.miss is not None:
                child_meta = self._first_pass(node.miss, this, graph, stack)
                if child_meta.is_loop_init:
                    min_read = 0
                else:
                    min_read = min(min_read, child_meta.min_read)
            if min_read == _UNBOUNDED:
                min_read = 0
        elif isinstance(node, Rope):
            min_read = len(node.pattern)
            then_meta = self._first_pass(node.then, this, graph, stack)
            if not then_meta.is_loop_init:
                min_read += then_meta.min_read
            miss = node.miss.first()
            if miss is not None:
                miss_meta = self._first_pass(miss, this, graph, stack)
                if miss_meta.is_loop_init:
                    min_read = 0
                else:
                    min_read = min(min_read, miss_meta.min_read)
        else:
            min_read = 0

        stack.pop()

        meta.min_read = int(min_read)
        for node_id in list(meta.loop_entry_from):
            self._second_pass(node_id, graph)

        return meta

    def _second_pass(self, id: int, graph: Any) -> None:
        node = graph[id]

        if isinstance(node, Fork):
            min_read: float = _UNBOUNDED
            for _, child in node.branches():
                child_meta = self[child]
                if child_meta.is_loop_init:
                    min_read = 1
                else:
                    min_read = min(min_read, child_meta.min_read + 1)
            if min_read == _UNBOUNDED:
                min_read = 0
        elif isinstance(node, Rope):
            min_read = len(node.pattern)
            then_meta = self[node.then]
            if not then_meta.is_loop_init:
                min_read += then_meta.min_read
        else:
            raise RuntimeError(f"leaf node {id} cannot point back into a loop")

        self._item(id).min_read = int(min_read)
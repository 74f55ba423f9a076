"""Fork nodes: a state that branches on the next input byte."""

from __future__ import annotations

from itertools import groupby
from operator import itemgetter
from typing import Any, Iterator, MutableSequence

from lexgraph.ranges import Range


def _as_range(value: Range | int | str) -> Range:
    if isinstance(value, Range):
        return value
    return Range.from_byte(value)


def _visit(graph: Any, node_id: int, filter: MutableSequence[bool]) -> None:
    """Mark ``node_id`` as referenced and descend into it once."""
    if filter[node_id]:
        return
    filter[node_id] = True
    shake = getattr(graph[node_id], "shake", None)
    if shake is not None:
        shake(graph, filter)


class Fork:
    """A state mapping each byte to a following node, with an optional miss target."""

    __slots__ = ("_lut", "miss")

    def __init__(self, miss: int | None = None) -> None:
        self._lut: list[int | None] = [None] * 256
        self.miss = miss

    def with_miss(self, miss: int | None) -> Fork:
        """Set the node to go to when no branch matches; returns self."""
        self.miss = miss
        return self

    def add_branch(self, range: Range | int | str, then: int, graph: Any) -> None:
        """Route every byte of ``range`` to ``then``, merging with existing targets."""
        for byte in _as_range(range):
            other = self._lut[byte]
            if other is not None and other != then:
                self._lut[byte] = graph.merge(other, then)
            else:
                self._lut[byte] = then

    def merge(self, other: Fork, graph: Any) -> None:
        """Merge another fork into this one, combining conflicting targets."""
        if self.miss is None:
            self.miss = other.miss
        elif other.miss is not None:
            self.miss = graph.merge(self.miss, other.miss)

        for byte, (left, right) in enumerate(zip(self._lut, other._lut)):
            if right is None:
                continue
            self._lut[byte] = right if left is None else graph.merge(left, right)

    def branches(self) -> Iterator[tuple[Range, int]]:
        """Yield consecutive byte ranges that lead to the same node, in byte order."""
        for then, group in groupby(enumerate(self._lut), key=itemgetter(1)):
            if then is None:
                continue
            bytes_ = [byte for byte, _ in group]
            yield Range(bytes_[0], bytes_[-1]), then

    def contains(self, range: Range | int | str) -> int | None:
        """The node all bytes of ``range`` lead to, or None if they differ or are missing."""
        targets = {self._lut[byte] for byte in _as_range(range)}
        if len(targets) != 1:
            return None
        return targets.pop()

    def branch(self, range: Range | int | str, then: int) -> Fork:
        """Add a branch that must not overlap a different target; returns self."""
        for byte in _as_range(range):
            other = self._lut[byte]
            if other is not None and other != then:
                raise ValueError("Overlapping branches")
            self._lut[byte] = then
        return self

    def shake(self, graph: Any, filter: MutableSequence[bool]) -> None:
        """Mark every node reachable from this fork in ``filter``."""
        if self.miss is not None:
            _visit(graph, self.miss, filter)
        for _, node_id in self.branches():
            _visit(graph, node_id, filter)

    def copy(self) -> Fork:
        clone = Fork(self.miss)
        clone._lut = list(self._lut)
        return clone

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Fork):
            return NotImplemented
        return self.miss == other.miss and self._lut == other._lut

    def __hash__(self) -> int:
        return hash((tuple(self.branches()), self.miss))

    def __repr__(self) -> str:
        arms = [f"{range} ⇒ {then}" for range, then in self.branches()]
        if self.miss is not None:
            arms.append(f"_ ⇒ {self.miss}")
        return "{" + ", ".join(arms) + "}"
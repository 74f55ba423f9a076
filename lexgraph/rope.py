"""Rope nodes: a state that matches a fixed sequence of byte ranges."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from itertools import takewhile
from typing import Any, Iterable, Iterator, MutableSequence, overload

from lexgraph.fork import Fork, _visit
from lexgraph.ranges import Range


def _to_ranges(source: Any) -> tuple[Range, ...]:
    if isinstance(source, Pattern):
        return source.ranges
    if isinstance(source, str):
        source = source.encode("utf-8")
    return tuple(item if isinstance(item, Range) else Range.from_byte(item) for item in source)


@dataclass(frozen=True, init=False)
class Pattern:
    """A sequence of byte ranges matched one after another."""

    ranges: tuple[Range, ...]

    def __init__(self, source: str | bytes | Iterable[Range | int] = ()) -> None:
        object.__setattr__(self, "ranges", _to_ranges(source))

    def to_bytes(self) -> bytes | None:
        """The literal bytes of the pattern, or None if any range spans more than one byte."""
        out = bytearray()
        for range_ in self.ranges:
            byte = range_.as_byte()
            if byte is None:
                return None
            out.append(byte)
        return bytes(out)

    def __len__(self) -> int:
        return len(self.ranges)

    def __iter__(self) -> Iterator[Range]:
        return iter(self.ranges)

    @overload
    def __getitem__(self, index: int) -> Range: ...

    @overload
    def __getitem__(self, index: slice) -> Pattern: ...

    def __getitem__(self, index):
        if isinstance(index, slice):
            return Pattern(self.ranges[index])
        return self.ranges[index]

    def __str__(self) -> str:
        return "".join(str(r) for r in self.ranges)


class MissKind(Enum):
    NONE = "none"
    FIRST = "first"
    ANY = "any"


@dataclass(frozen=True)
class Miss:
    """Where a rope goes when it fails: nowhere, only on the first byte, or on any byte."""

    kind: MissKind = MissKind.NONE
    id: int | None = None

    def is_none(self) -> bool:
        return self.kind is MissKind.NONE

    def first(self) -> int | None:
        """The miss target regardless of kind, or None."""
        return None if self.is_none() else self.id

    def take_first(self) -> tuple[int | None, Miss]:
        """The target for a first-byte miss, and the miss left for the rest of the pattern."""
        if self.kind is MissKind.FIRST:
            return self.id, Miss()
        if self.kind is MissKind.ANY:
            return self.id, self
        return None, self

    def __str__(self) -> str:
        if self.kind is MissKind.FIRST:
            return str(self.id)
        if self.kind is MissKind.ANY:
            return f"{self.id}*"
        return "n/a"


def _as_miss(value: Miss | int | None) -> Miss:
    if isinstance(value, Miss):
        return value
    if value is None:
        return Miss()
    return Miss(MissKind.FIRST, value)


@dataclass(frozen=True)
class Rope:
    """A state matching ``pattern`` and then continuing at ``then``."""

    pattern: Pattern
    then: int
    miss: Miss = field(default_factory=Miss)

    def __post_init__(self) -> None:
        if not isinstance(self.pattern, Pattern):
            object.__setattr__(self, "pattern", Pattern(self.pattern))

    def with_miss(self, miss: Miss | int | None) -> Rope:
        """A copy whose miss is ``miss``; a bare id means a first-byte miss."""
        return Rope(self.pattern, self.then, _as_miss(miss))

    def miss_any(self, miss: int) -> Rope:
        """A copy that goes to ``miss`` on a partial or empty match."""
        return Rope(self.pattern, self.then, Miss(MissKind.ANY, miss))

    def into_fork(self, graph: Any) -> Fork:
        """A fork on the first range, leading to a rope for the rest (pushed onto ``graph``)."""
        if not self.pattern:
            raise ValueError("cannot fork off an empty rope")
        first = self.pattern[0]
        first_miss, rest_miss = self.miss.take_first()
        rest = self.pattern[1:]
        then = graph.push(Rope(rest, self.then, rest_miss)) if rest else self.then
        return Fork().branch(first, then).with_miss(first_miss)

    def prefix(self, other: Rope) -> tuple[Pattern, Miss] | None:
        """The common leading ranges of two ropes and their combined miss, if compatible."""
        count = sum(1 for _ in takewhile(lambda pair: pair[0] == pair[1], zip(self.pattern, other.pattern)))
        if count == 0:
            return None
        if self.miss.is_none():
            miss = other.miss
        elif other.miss.is_none():
            miss = self.miss
        else:
            return None
        return self.pattern[:count], miss

    def split_at(self, at: int, graph: Any) -> Rope | None:
        """Split after ``at`` ranges, pushing the tail onto ``graph``; None when ``at`` is 0."""
        if at == 0:
            return None
        if at == len(self.pattern):
            return self
        next_miss = self.miss if self.miss.kind is MissKind.ANY else Miss()
        next_id = graph.push(Rope(self.pattern[at:], self.then, next_miss))
        return Rope(self.pattern[:at], next_id, self.miss)

    def remainder(self, at: int, graph: Any) -> int:
        """The node matching what is left after ``at`` ranges."""
        rest = self.pattern[at:]
        if not rest:
            return self.then
        return graph.push(Rope(rest, self.then, self.miss))

    def shake(self, graph: Any, filter: MutableSequence[bool]) -> None:
        """Mark every node reachable from this rope in ``filter``."""
        miss = self.miss.first()
        if miss is not None:
            _visit(graph, miss, filter)
        _visit(graph, self.then, filter)

    def __repr__(self) -> str:
        arm = f"{self.pattern} ⇒ {self.then}"
        if self.miss.is_none():
            return arm
        return f"[{arm}, _ ⇒ {self.miss}]"
"""Inclusive byte ranges used as edges of the lexer state graph."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator


def _is_printable_ascii(byte: int) -> bool:
    return 0x20 <= byte < 0x7F


def _to_byte(value: int | str) -> int:
    if isinstance(value, str):
        if len(value) != 1:
            raise ValueError(f"expected a single character, got {value!r}")
        value = ord(value)
    if not isinstance(value, int) or not 0 <= value <= 0xFF:
        raise ValueError(f"byte value out of range: {value!r}")
    return value


@dataclass(frozen=True)
class Range:
    """An inclusive range of byte values ``start..=end``."""

    start: int
    end: int

    def __post_init__(self) -> None:
        _to_byte(self.start)
        _to_byte(self.end)

    @classmethod
    def from_byte(cls, byte: int | str) -> Range:
        """A range holding exactly one byte."""
        value = _to_byte(byte)
        return cls(value, value)

    @classmethod
    def from_chars(cls, start: int | str, end: int | str) -> Range:
        """A range between two bytes or single-byte characters, inclusive."""
        return cls(_to_byte(start), _to_byte(end))

    def as_byte(self) -> int | None:
        """The single byte of this range, or None if it spans more."""
        return self.start if self.is_byte() else None

    def is_byte(self) -> bool:
        return self.start == self.end

    def __iter__(self) -> Iterator[int]:
        return iter(range(self.start, self.end + 1))

    # Ranges are ordered by their first byte only.
    def __lt__(self, other: Range) -> bool:
        if not isinstance(other, Range):
            return NotImplemented
        return self.start < other.start

    def __le__(self, other: Range) -> bool:
        if not isinstance(other, Range):
            return NotImplemented
        return self.start <= other.start

    def __gt__(self, other: Range) -> bool:
        if not isinstance(other, Range):
            return NotImplemented
        return self.start > other.start

    def __ge__(self, other: Range) -> bool:
        if not isinstance(other, Range):
            return NotImplemented
        return self.start >= other.start

    def __str__(self) -> str:
        start, end = self.start, self.end
        parts = []
        if start != end or not _is_printable_ascii(start):
            parts.append("[")
        parts.append(chr(start) if _is_printable_ascii(start) else f"{start:02X}")
        if start != end:
            parts.append(f"-{chr(end)}]" if _is_printable_ascii(end) else f"-{end:02X}]")
        elif not _is_printable_ascii(start):
            parts.append("]")
        return "".join(parts)
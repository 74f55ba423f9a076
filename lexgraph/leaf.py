"""Terminal states of the lexer graph: the tokens a definition produces."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from enum import Enum
from typing import Any


class CallbackKind(Enum):
    LABEL = "label"
    INLINE = "inline"
    SKIP = "skip"


@dataclass(frozen=True)
class InlineCallback:
    """A callback written inline as a closure: argument name and body."""

    arg: str
    body: str
    span: Any = None


@dataclass(frozen=True)
class Callback:
    """What to run when a leaf matches: a named function, inline code, or a skip."""

    kind: CallbackKind
    span: Any = None
    label: str | None = None
    inline: InlineCallback | None = None

    @classmethod
    def from_label(cls, label: str, span: Any = None) -> Callback:
        return cls(CallbackKind.LABEL, span=span, label=label)

    @classmethod
    def from_inline(cls, inline: InlineCallback) -> Callback:
        return cls(CallbackKind.INLINE, span=inline.span, inline=inline)

    @classmethod
    def skip(cls, span: Any = None) -> Callback:
        return cls(CallbackKind.SKIP, span=span)


@dataclass(frozen=True)
class Leaf:
    """A token definition reached at the end of a match."""

    ident: str | None
    span: Any = None
    priority: int = 0
    field: str | None = None
    callback: Callback | None = None

    @classmethod
    def new_skip(cls, span: Any) -> Leaf:
        """A leaf that discards the matched input."""
        return cls(None, span, callback=Callback.skip(span))

    def with_callback(self, callback: Callback | None) -> Leaf:
        return dataclasses.replace(self, callback=callback)

    def with_field(self, field: str | None) -> Leaf:
        return dataclasses.replace(self, field=field)

    def with_priority(self, priority: int) -> Leaf:
        return dataclasses.replace(self, priority=priority)

    def disambiguate(self, other: Leaf) -> int:
        """Compare priorities: negative, zero or positive as self is lower, equal or higher."""
        return (self.priority > other.priority) - (self.priority < other.priority)

    def __str__(self) -> str:
        return self.ident if self.ident is not None else "<skip>"

    def __repr__(self) -> str:
        text = f"::{self}"
        if self.callback is None:
            return text
        if self.callback.kind is CallbackKind.LABEL:
            return f"{text} ({self.callback.label})"
        if self.callback.kind is CallbackKind.INLINE:
            return f"{text} (<inline>)"
        return f"{text} (<skip>)"
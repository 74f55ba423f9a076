"""Errors collected while building a lexer definition."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator


def _rust_string_literal(text: str) -> str:
    escaped = (
        text.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
        .replace("\r", "\\r")
        .replace("\t", "\\t")
        .replace("\0", "\\0")
    )
    return f'"{escaped}"'


class LogosError(Exception):
    """An error message not yet tied to a location."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = str(message)

    def span(self, span: Any) -> SpannedError:
        """Attach a location to this error."""
        return SpannedError(self.message, span)

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class SpannedError:
    """An error message tied to a location in the input."""

    message: str
    span: Any


@dataclass
class Errors:
    """A collection of located errors, rendered as compile errors."""

    collected: list[SpannedError] = field(default_factory=list)

    def err(self, message: str | LogosError, span: Any) -> Errors:
        """Record an error at ``span``; returns self for chaining."""
        self.collected.append(SpannedError(str(message), span))
        return self

    def render(self) -> str | None:
        """Render all errors as a function of compile errors, or None if empty."""
        if not self.collected:
            return None
        body = "".join(
            f"    {{ compile_error!({_rust_string_literal(e.message)}) }}\n"
            for e in self.collected
        )
        return f"fn _logos_derive_compile_errors() {{\n{body}}}"

    def __iter__(self) -> Iterator[SpannedError]:
        return iter(self.collected)

    def __len__(self) -> int:
        return len(self.collected)
"""Shared byte lookup tables, each packing eight membership sets as bit masks."""

from __future__ import annotations

TABLE_PREFIX = "COMPACT_TABLE_"


class TableView:
    """One bit plane of a lookup table, used to mark a set of bytes."""

    def __init__(self, ident: str, table: bytearray, mask: int) -> None:
        self._ident = ident
        self._table = table
        self._mask = mask

    def ident(self) -> str:
        return self._ident

    def flag(self, byte: int) -> None:
        """Mark ``byte`` as a member of this view's set."""
        self._table[byte] |= self._mask

    def mask(self) -> int:
        return self._mask


class TableStack:
    """Allocates bit planes across 256-entry tables, opening a new table every eight."""

    def __init__(self) -> None:
        self.tables: list[tuple[str, bytearray]] = [(f"{TABLE_PREFIX}0", bytearray(256))]
        self.shift = 0

    def view(self) -> TableView:
        """Reserve the next free bit plane."""
        if self.shift < 8:
            mask = 1 << self.shift
            self.shift += 1
        else:
            self.tables.append((f"{TABLE_PREFIX}{len(self.tables)}", bytearray(256)))
            self.shift = 1
            mask = 1
        ident, table = self.tables[-1]
        return TableView(ident, table, mask)

    def render(self) -> str:
        """Static table declarations; empty when no view was ever taken."""
        if self.shift == 0:
            return ""
        return "\n".join(
            f"static {ident}: [u8; 256] = [{', '.join(str(b) for b in table)}];"
            for ident, table in self.tables
        )
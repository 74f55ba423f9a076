"""Building blocks for lexer state graphs: byte ranges, forks, ropes, leaves, merging and analysis."""

__version__ = "0.1.0"

__all__ = ["errors", "fork", "graph", "leaf", "meta", "ranges", "rope", "tables"]
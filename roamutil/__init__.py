"""Pseudo-terminal, signal-aware select, locale, timestamp, write and assertion utilities."""

__version__ = "0.1.0"

__all__ = [
    "assertions",
    "locale_utils",
    "pty_compat",
    "selector",
    "swrite",
    "timestamp",
]
"""Data models and transfer objects."""

from .symbol import UNKNOWN, UNKNOWN_SYMBOL, Symbol

__all__ = [
    "UNKNOWN",
    "UNKNOWN_SYMBOL",
    "Symbol",
]

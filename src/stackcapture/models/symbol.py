"""Data model for resolved call-site symbols."""

from dataclasses import dataclass

UNKNOWN = "unknown"


@dataclass(frozen=True)
class Symbol:
    """Source location of a single call-site address."""

    file: str  # Full path as recorded in the code object
    line: int
    function: str  # Fully-qualified, e.g. "pkg/module.Class.method"

    @property
    def is_unknown(self) -> bool:
        """Check if the function could not be named; file and line are then meaningless."""
        return self.function == UNKNOWN


UNKNOWN_SYMBOL = Symbol(file=UNKNOWN, line=0, function=UNKNOWN)

"""Abstract interface for call-site symbol lookup."""

from typing import Protocol, runtime_checkable

from ..models.symbol import Symbol


@runtime_checkable
class Resolver(Protocol):
    """Maps a call-site address to its source location.

    This protocol defines the contract that all symbol sources
    (the process code table, caches, test fakes) must implement.
    """

    def resolve(self, pc: int) -> Symbol | None:
        """
        Look up the source location of an instruction address.

        Args:
            pc: The true instruction address, with any handle bias
                already removed

        Returns:
            The resolved symbol, or None if no metadata covers the address

        Note:
            Must not raise and must not have side effects; repeated
            calls with the same address return the same result.
        """
        ...

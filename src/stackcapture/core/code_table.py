"""Process-wide table mapping call-site addresses to code objects.

Python frames have no machine program counter, so the table builds an
address space of its own: every code object seen during capture is given a
contiguous range ``[base, base + len(co_code))`` and the address of a call
site is ``base + f_lasti``. Ranges are handed out in increasing order and
never reused, so an address identifies exactly one instruction of one code
object for the lifetime of the process.

Resolution reverses the mapping and reads the file name, line table and
qualified name from the code object itself.
"""

from __future__ import annotations

import bisect
import os
import threading
from dataclasses import dataclass
from types import CodeType

import structlog

from stackcapture.models.symbol import Symbol
from stackcapture.utils.logging import LogEventNames

log = structlog.get_logger()

# Addresses below the first base are never valid, so handle 0 stays unknown.
BASE_ADDRESS = 0x1000
# Unused addresses between neighbouring ranges.
RANGE_GAP = 2


@dataclass(frozen=True)
class CodeRange:
    """A registered code object and the addresses it owns."""

    base: int
    code: CodeType
    function: str

    @property
    def end(self) -> int:
        return self.base + len(self.code.co_code)

    def contains(self, pc: int) -> bool:
        return self.base <= pc < self.end


def qualified_name(code: CodeType, module: str | None = None) -> str:
    """Build the fully-qualified name of a code object.

    The module path uses ``/`` between its components and a single ``.``
    before the qualified name, e.g. ``stackcapture/core/frame.Frame.format``,
    so the short name can be recovered by stripping the path and the module.

    Args:
        code: Code object of the function
        module: Dotted name of the defining module, if known

    Returns:
        Fully-qualified function name
    """
    if not module:
        module = os.path.splitext(os.path.basename(code.co_filename))[0] or "__main__"
    return f"{module.replace('.', '/')}.{code.co_qualname}"


def line_for_offset(code: CodeType, offset: int) -> int:
    """Return the source line of the instruction at a bytecode offset."""
    for start, end, line in code.co_lines():
        if start <= offset < end:
            return line if line is not None else code.co_firstlineno
    return code.co_firstlineno


class CodeTable:
    """Registry of code objects addressed by integer call-site addresses.

    Implements the Resolver protocol. Entries are never evicted: the table
    keeps a strong reference to every code object it has registered, so
    code compiled at run time (exec, compile) grows it without bound.

    Example:
        table = CodeTable()
        pc = table.address_of(frame.f_code, frame.f_lasti)
        symbol = table.resolve(pc)
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._by_code: dict[int, CodeRange] = {}
        self._bases: list[int] = []
        self._ranges: list[CodeRange] = []
        self._next_base = BASE_ADDRESS

    def __len__(self) -> int:
        return len(self._ranges)

    def register(self, code: CodeType, module: str | None = None) -> int:
        """Register a code object and return the base of its address range.

        Registering the same code object again returns the existing base.
        Entries keep a strong reference to their code object, so ``id(code)``
        cannot be recycled while the entry exists.

        Args:
            code: Code object to register
            module: Dotted name of the defining module

        Returns:
            First address owned by the code object
        """
        entry = self._by_code.get(id(code))
        if entry is not None:
            return entry.base

        with self._lock:
            entry = self._by_code.get(id(code))
            if entry is not None:
                return entry.base

            entry = CodeRange(
                base=self._next_base,
                code=code,
                function=qualified_name(code, module),
            )
            self._next_base = entry.end + RANGE_GAP
            self._ranges.append(entry)
            self._bases.append(entry.base)
            self._by_code[id(code)] = entry

        log.debug(
            LogEventNames.CODE_REGISTERED,
            function=entry.function,
            base=hex(entry.base),
        )
        return entry.base

    def address_of(self, code: CodeType, offset: int, module: str | None = None) -> int:
        """Return the address of the instruction at ``offset`` in ``code``."""
        return self.register(code, module) + offset

    def resolve(self, pc: int) -> Symbol | None:
        """Resolve an address to its file, line and function name.

        Args:
            pc: Instruction address

        Returns:
            The symbol, or None if no registered code object owns the address
        """
        with self._lock:
            index = bisect.bisect_right(self._bases, pc) - 1
            entry = self._ranges[index] if index >= 0 else None

        if entry is None or not entry.contains(pc):
            log.debug(LogEventNames.SYMBOL_NOT_FOUND, pc=hex(pc))
            return None

        return Symbol(
            file=entry.code.co_filename,
            line=line_for_offset(entry.code, pc - entry.base),
            function=entry.function,
        )


_process_table = CodeTable()


def process_table() -> CodeTable:
    """Return the table shared by every capture in this process.

    The table only grows; see CodeTable.
    """
    return _process_table

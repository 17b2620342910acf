"""Single call-site frames and their text rendering.

A Frame is an integer handle for one call site. For historical reasons
the stored value is the call-site address plus one (stack walkers report
return addresses, which point one past the call); ``Frame.pc()`` removes
that bias before anything is looked up.

Frames render through Python's format protocol with a one-letter verb
and an optional ``+`` flag:

    s    base name of the source file
    d    source line
    n    short function name
    v    equivalent to s:d

    +s   full function name and full file path separated by newline-tab
    +v   equivalent to +s:d

An empty spec means ``v``; unknown verbs render nothing.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import StrEnum

from stackcapture.core.defaults import default_resolver
from stackcapture.interfaces.resolver import Resolver
from stackcapture.models.symbol import UNKNOWN, UNKNOWN_SYMBOL, Symbol


class Verb(StrEnum):
    """Formatting verbs understood by frames and traces."""

    FILE = "s"
    LINE = "d"
    NAME = "n"
    COMPOSITE = "v"


@dataclass(frozen=True)
class FormatSpec:
    """A parsed format spec: verb plus modifier flags."""

    verb: Verb | None  # None for unrecognised verbs
    detailed: bool = False  # "+"
    alternate: bool = False  # "#"


def parse_format_spec(spec: str) -> FormatSpec:
    """Split a spec such as ``"+v"`` into its verb and flags."""
    flags = spec[: len(spec) - len(spec.lstrip("+#"))]
    letter = spec[len(flags) :] or Verb.COMPOSITE.value
    try:
        verb: Verb | None = Verb(letter)
    except ValueError:
        verb = None
    return FormatSpec(verb=verb, detailed="+" in flags, alternate="#" in flags)


def funcname(name: str) -> str:
    """Strip the package path and module from a fully-qualified function name.

    ``"github.com/example/pkg.(*Type).Method"`` becomes ``"Method"`` and
    ``"stackcapture/core/frame.Frame.format"`` becomes ``"Frame.format"``.
    A name with no dot after its last ``/`` is returned as that remainder.
    """
    name = name[name.rfind("/") + 1 :]
    dot = name.find(".")
    if dot < 0:
        return name
    name = name[dot + 1 :]

    # Parenthesised method receiver, e.g. "(*Type).Method"
    if name.startswith("("):
        close = name.find(").")
        if close >= 0:
            name = name[close + 2 :]
    return name


@dataclass(frozen=True, repr=False)
class Frame:
    """A program counter inside a stack frame.

    Two frames with the same value are equal and resolve identically;
    the resolver they are bound to is not part of their identity.
    """

    value: int
    resolver: Resolver = field(default_factory=default_resolver, compare=False)

    def pc(self) -> int:
        """Return the call-site address; multiple frames may share one."""
        return self.value - 1

    def symbol(self) -> Symbol:
        """Resolve this frame, falling back to the unknown symbol."""
        symbol = self.resolver.resolve(self.pc())
        if symbol is None:
            return UNKNOWN_SYMBOL
        return symbol

    def file(self) -> str:
        """Full path of the file containing this frame's function."""
        return self.symbol().file

    def line(self) -> int:
        return self.symbol().line

    def name(self) -> str:
        """Fully-qualified function name, or "unknown"."""
        return self.symbol().function

    def marshal_text(self) -> str:
        """Render the frame on a single line for structured output.

        Same content as ``+v`` without the newline and tab:
        ``"<function> <file>:<line>"``, or just ``"unknown"``.
        """
        symbol = self.symbol()
        if symbol.is_unknown:
            return UNKNOWN
        return f"{symbol.function} {symbol.file}:{symbol.line}"

    def __format__(self, spec: str) -> str:
        parsed = parse_format_spec(spec)
        if parsed.verb is None:
            return ""
        return format_frame(self, parsed.verb, parsed.detailed)

    def __str__(self) -> str:
        return format_frame(self, Verb.COMPOSITE)

    def __repr__(self) -> str:
        return f"Frame({self.value:#x})"

    def __int__(self) -> int:
        return self.value

    def __index__(self) -> int:
        return self.value


def render_symbol(symbol: Symbol, verb: Verb, detailed: bool = False) -> str:
    """Render an already resolved symbol according to a verb."""
    if verb is Verb.FILE:
        if detailed:
            return f"{symbol.function}\n\t{symbol.file}"
        return os.path.basename(symbol.file)
    if verb is Verb.LINE:
        return str(symbol.line)
    if verb is Verb.NAME:
        return funcname(symbol.function)
    # Verb.COMPOSITE
    return f"{render_symbol(symbol, Verb.FILE, detailed)}:{render_symbol(symbol, Verb.LINE)}"


def format_frame(frame: Frame, verb: Verb, detailed: bool = False) -> str:
    """Render one frame; resolves the frame once per call."""
    return render_symbol(frame.symbol(), verb, detailed)

"""Call-stack capture and whole-trace rendering."""

from __future__ import annotations

import io
import sys
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from types import FrameType
from typing import SupportsIndex, overload

from stackcapture.core.code_table import CodeTable, process_table
from stackcapture.core.defaults import default_max_depth, default_resolver
from stackcapture.core.frame import Frame, Verb, format_frame, parse_format_spec
from stackcapture.interfaces.resolver import Resolver


def format_trace(trace: Sequence[Frame], verb: Verb, detailed: bool = False) -> str:
    """Render a sequence of frames.

    ``+v`` lists every frame on its own newline-prefixed block; every other
    verb renders a bracketed, space-separated list such as
    ``[main.py:12 app.py:40]``.

    Args:
        trace: Frames, innermost first
        verb: Verb applied to each frame
        detailed: The ``+`` flag

    Returns:
        Rendered trace
    """
    if verb is Verb.COMPOSITE and detailed:
        buf = io.StringIO()
        for frame in trace:
            buf.write("\n")
            buf.write(format_frame(frame, verb, detailed))
        return buf.getvalue()

    return "[" + " ".join(format_frame(frame, verb, detailed) for frame in trace) + "]"


class StackTrace(tuple[Frame, ...]):
    """Stack of Frames from innermost (newest) to outermost (oldest).

    Formats with the same verbs as Frame:

        f"{trace}"     [file:line file:line ...]
        f"{trace:s}"   [file file ...]
        f"{trace:+v}"  one "+v" frame per line, each preceded by a newline
        f"{trace:#v}"  the repr of the trace (the + flag takes precedence)
    """

    __slots__ = ()

    @overload
    def __getitem__(self, index: SupportsIndex) -> Frame: ...

    @overload
    def __getitem__(self, index: slice) -> StackTrace: ...

    def __getitem__(self, index: SupportsIndex | slice) -> Frame | StackTrace:
        if isinstance(index, slice):
            return StackTrace(super().__getitem__(index))
        return super().__getitem__(index)

    def __format__(self, spec: str) -> str:
        parsed = parse_format_spec(spec)
        if parsed.verb is None:
            return ""
        if parsed.alternate and not parsed.detailed and parsed.verb is Verb.COMPOSITE:
            return repr(self)
        return format_trace(self, parsed.verb, parsed.detailed)

    def __str__(self) -> str:
        return format_trace(self, Verb.COMPOSITE)

    def __repr__(self) -> str:
        return f"StackTrace([{', '.join(repr(frame) for frame in self)}])"


@dataclass(frozen=True)
class Stack:
    """Raw call-site handles recorded by one capture, innermost first.

    Handles are stored biased by one, exactly as frames expect them.
    """

    pcs: tuple[int, ...]
    resolver: Resolver = field(default_factory=default_resolver, compare=False, repr=False)

    def __len__(self) -> int:
        return len(self.pcs)

    def __iter__(self) -> Iterator[int]:
        return iter(self.pcs)

    def as_trace(self) -> StackTrace:
        """Return the handles typed as Frames bound to this stack's resolver."""
        return StackTrace(Frame(pc, self.resolver) for pc in self.pcs)

    def __format__(self, spec: str) -> str:
        # Only the vertical listing is rendered for a raw stack.
        parsed = parse_format_spec(spec)
        if parsed.verb is Verb.COMPOSITE and parsed.detailed:
            return format_trace(self.as_trace(), Verb.COMPOSITE, detailed=True)
        return ""


def capture(
    skip: int = 0,
    max_depth: int | None = None,
    *,
    table: CodeTable | None = None,
    resolver: Resolver | None = None,
) -> Stack:
    """Record the calling thread's active frames.

    The trace starts at the function that called ``capture``; ``skip``
    drops that many further frames, so a helper that captures on behalf
    of its caller passes ``skip=1``. Nothing is resolved here.

    Args:
        skip: Frames to omit above the caller of capture
        max_depth: Maximum frames to record; deeper stacks are truncated
            at the oldest end. Defaults to the configured depth (32).
        table: Code table that issues addresses (process table by default)
        resolver: Resolver bound to the result. Defaults to ``table`` when
            one is given, otherwise to the configured default resolver.

    Returns:
        The captured stack, possibly empty

    Raises:
        ValueError: If skip or max_depth is negative
    """
    if skip < 0:
        raise ValueError(f"skip must not be negative, got {skip}")
    if max_depth is None:
        max_depth = default_max_depth()
    elif max_depth < 0:
        raise ValueError(f"max_depth must not be negative, got {max_depth}")

    if resolver is None:
        resolver = table if table is not None else default_resolver()
    if table is None:
        table = process_table()

    try:
        current: FrameType | None = sys._getframe(skip + 1)
    except ValueError:
        # Fewer frames than requested to skip
        return Stack((), resolver)

    pcs: list[int] = []
    while current is not None and len(pcs) < max_depth:
        address = table.address_of(
            current.f_code,
            current.f_lasti,
            current.f_globals.get("__name__"),
        )
        pcs.append(address + 1)
        current = current.f_back

    return Stack(tuple(pcs), resolver)

"""Core capture and formatting components.

This module exports:
- capture: Records the active call stack as a Stack
- Stack / StackTrace: Raw and Frame-typed call-site sequences
- Frame: A single call site with lazy resolution and verb formatting
- CodeTable: Process-wide address space for Python code objects
- CachingResolver: Memoizing resolver wrapper
"""

from stackcapture.core.caching import CachingResolver
from stackcapture.core.code_table import CodeTable, process_table
from stackcapture.core.defaults import (
    MAX_DEPTH,
    configure,
    default_max_depth,
    default_resolver,
    reset_defaults,
    set_defaults,
)
from stackcapture.core.frame import Frame, Verb, format_frame, funcname
from stackcapture.core.stack import Stack, StackTrace, capture, format_trace

__all__ = [
    "MAX_DEPTH",
    "CachingResolver",
    "CodeTable",
    "Frame",
    "Stack",
    "StackTrace",
    "Verb",
    "capture",
    "configure",
    "default_max_depth",
    "default_resolver",
    "format_frame",
    "format_trace",
    "funcname",
    "process_table",
    "reset_defaults",
    "set_defaults",
]

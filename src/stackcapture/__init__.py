"""Deferred call-stack capture and formatting.

Capture is cheap and happens when an error is created; file, line and
function names are resolved only when the trace is formatted:

    stack = capture()
    ...
    print(f"{stack.as_trace():+v}")
"""

from stackcapture.config import StackCaptureConfig, load_config
from stackcapture.core import (
    MAX_DEPTH,
    CachingResolver,
    CodeTable,
    Frame,
    Stack,
    StackTrace,
    Verb,
    capture,
    configure,
    format_frame,
    format_trace,
    funcname,
    process_table,
    reset_defaults,
)
from stackcapture.interfaces import Resolver
from stackcapture.models import Symbol

__all__ = [
    "MAX_DEPTH",
    "CachingResolver",
    "CodeTable",
    "Frame",
    "Resolver",
    "Stack",
    "StackCaptureConfig",
    "StackTrace",
    "Symbol",
    "Verb",
    "capture",
    "configure",
    "format_frame",
    "format_trace",
    "funcname",
    "load_config",
    "process_table",
    "reset_defaults",
]

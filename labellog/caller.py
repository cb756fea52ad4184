"""Attribute a log message to the function that issued it."""
from __future__ import annotations

import traceback

UNKNOWN_CALLER = "Unknown"

# Frames from the innermost one down to the caller of the public API:
#   1. current_caller
#   2. MessageFormatter.format
#   3. Logger.emit (label methods are partials of emit and add no frame)
#   4. the application code that logged the message
# Must be updated whenever a layer is added between Logger.emit and here.
CALLER_STACK_DEPTH = 4


def current_caller(depth: int = CALLER_STACK_DEPTH) -> str:
    """Return ``"<function> @ <file>:<line>"`` for the frame ``depth`` levels up.

    ``"Unknown"`` is returned when the stack is shallower than ``depth`` or
    the frame carries no function name or source location.
    """

    stack = traceback.extract_stack(limit=depth)
    if len(stack) < depth:
        return UNKNOWN_CALLER
    frame = stack[0]
    if not frame.name or not frame.filename or frame.lineno is None:
        return UNKNOWN_CALLER
    return f"{frame.name} @ {frame.filename}:{frame.lineno}"

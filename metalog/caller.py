"""caller.py - Capture of the source location that issued a log call.

Every log line names the file, function and line it came from. Callers can
pass that location explicitly (``caller=CallerInfo(...)``); when they do not,
the writer reads it from the interpreter stack at the moment of the call.
"""

import sys
from typing import NamedTuple, Optional


class CallerInfo(NamedTuple):
    """Source location of a log call."""

    file: Optional[str]
    member: Optional[str]
    line: int


UNKNOWN_CALLER = CallerInfo(None, None, 0)


def capture_caller(stacklevel: int = 1) -> CallerInfo:
    """Return the location of the frame ``stacklevel`` levels above the caller.

    ``stacklevel=1`` designates the code that called the function invoking
    ``capture_caller()``, matching the meaning of ``stacklevel`` in the
    standard ``logging`` module.

    Args:
        stacklevel: How many frames above the immediate caller to look.

    Returns:
        The captured location, or ``UNKNOWN_CALLER`` if the stack is not that
        deep.
    """
    try:
        # +1 skips this function's own frame.
        frame = sys._getframe(stacklevel + 1)
    except ValueError:
        return UNKNOWN_CALLER
    code = frame.f_code
    return CallerInfo(code.co_filename, code.co_name, frame.f_lineno)

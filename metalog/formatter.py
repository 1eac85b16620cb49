"""formatter.py - Renders a single MetaLog line.

Every entry written by a LogWriter has the same shape::

    [Error]    [2024-01-15 12:34:56.789] [billing.charge:42]:                   card declined

The first column is padded to ``SEVERITY_WIDTH`` (the longest name,
``Critical``, plus its brackets) and the caller column to ``CALLER_WIDTH``.
Padding only ever appends spaces; a field that is already at or above its
width is written as-is, never truncated. Existing log files depend on this
layout, so the widths, bracket characters and field order are fixed.

All functions here are pure. The timestamp is passed in by the caller, which
keeps the output reproducible under a fixed clock.
"""

import os
from datetime import datetime
from typing import Optional

from .severity import Severity
from .text import NEWLINE

SEVERITY_WIDTH = 10
CALLER_WIDTH = 40


def pad(text: str, width: int) -> str:
    """Right-pad ``text`` with spaces to ``width``. Longer text is unchanged."""
    if len(text) >= width:
        return text
    return text + " " * (width - len(text))


def format_timestamp(moment: datetime) -> str:
    """Render ``moment`` as ``YYYY-MM-DD HH:MM:SS.fff`` (milliseconds)."""
    return f"{moment:%Y-%m-%d %H:%M:%S}.{moment.microsecond // 1000:03d}"


def format_caller(
    caller_file: Optional[str], caller_member: Optional[str], caller_line: int
) -> str:
    """Build the ``[file.member:line]:`` column, before padding.

    Only the file's base name without extension is kept, so
    ``/srv/app/billing.py`` becomes ``billing``.
    """
    file_name = ""
    if caller_file:
        file_name = os.path.splitext(os.path.basename(caller_file))[0]
    return f"[{file_name}.{caller_member or ''}:{caller_line}]:"


def format_message(
    severity: Severity,
    text: str,
    caller_file: Optional[str],
    caller_member: Optional[str],
    caller_line: int,
    timestamp: Optional[datetime] = None,
) -> str:
    """Render one complete log line, including the trailing ``NEWLINE``.

    Args:
        severity: Severity of the entry.
        text: Message body. May itself span several lines (exception trees
            do); it is written verbatim after the caller column.
        caller_file: Path of the source file that logged the entry.
        caller_member: Function (or ``<module>``) that logged the entry.
        caller_line: Line number of the logging call.
        timestamp: Moment of the entry in local time. Defaults to now.

    Returns:
        The formatted line.
    """
    if timestamp is None:
        timestamp = datetime.now()
    severity_column = pad(f"[{severity.label}]", SEVERITY_WIDTH)
    caller_column = pad(format_caller(caller_file, caller_member, caller_line), CALLER_WIDTH)
    return (
        f"{severity_column} [{format_timestamp(timestamp)}] "
        f"{caller_column} {text}{NEWLINE}"
    )

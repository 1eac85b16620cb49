"""severity.py - Ordered severity levels for MetaLog entries.

Severity is an ``IntEnum`` so that the writer's filter is a plain comparison::

    if severity < writer.min_severity:
        return  # suppressed

The rendered name (``Severity.ERROR.label == "Error"``) is what appears inside
the first bracketed column of every log line.
"""

import logging
from enum import IntEnum
from typing import Union


class Severity(IntEnum):
    """Importance category of a log entry, ordered from least to most severe."""

    DEBUG = 0
    INFO = 1
    WARNING = 2
    ERROR = 3
    CRITICAL = 4

    @property
    def label(self) -> str:
        """Name as written to the log file, e.g. ``"Warning"``."""
        return self.name.capitalize()

    def to_logging_level(self) -> int:
        """Return the matching standard ``logging`` level constant."""
        return _TO_LOGGING[self]

    @classmethod
    def from_logging_level(cls, levelno: int) -> "Severity":
        """Map a standard ``logging`` level onto one of the five severities.

        Custom levels fall into the bucket of the closest standard level at or
        below them, e.g. a NOTICE level of 25 becomes ``INFO``.

        Args:
            levelno: A ``logging`` level number such as ``logging.WARNING``.

        Returns:
            The corresponding Severity. Levels below INFO map to DEBUG.
        """
        if levelno >= logging.CRITICAL:
            return cls.CRITICAL
        if levelno >= logging.ERROR:
            return cls.ERROR
        if levelno >= logging.WARNING:
            return cls.WARNING
        if levelno >= logging.INFO:
            return cls.INFO
        return cls.DEBUG

    @classmethod
    def parse(cls, value: Union["Severity", int, str]) -> "Severity":
        """Coerce a Severity, its integer value, or its name into a Severity.

        Names are matched case-insensitively (``"error"``, ``"Error"`` and
        ``"ERROR"`` are equivalent).

        Raises:
            ValueError: If ``value`` names no severity.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls[value.strip().upper()]
            except KeyError:
                raise ValueError(f"unknown severity name: {value!r}") from None
        if isinstance(value, int) and not isinstance(value, bool):
            return cls(value)
        raise ValueError(f"cannot interpret {value!r} as a severity")


_TO_LOGGING = {
    Severity.DEBUG: logging.DEBUG,
    Severity.INFO: logging.INFO,
    Severity.WARNING: logging.WARNING,
    Severity.ERROR: logging.ERROR,
    Severity.CRITICAL: logging.CRITICAL,
}

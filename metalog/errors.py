"""errors.py - Exception types raised by MetaLog.

OS-level failures while opening or writing a file are not wrapped; they reach
the caller as the builtin ``OSError`` (``FileNotFoundError``,
``PermissionError``, ...).
"""


class MetaLogError(Exception):
    """Base class for every error raised by MetaLog itself."""


class ConfigurationError(MetaLogError, ValueError):
    """A writer was constructed or configured with an unusable value.

    Raised for a ``None`` or unknown encoding, a ``None``, closed or read-only
    stream, and an empty or non-path target.
    """


class InvalidStateError(MetaLogError, RuntimeError):
    """An operation was attempted on a writer that cannot perform it.

    Raised when writing to (or configuring) a closed writer, or when writing
    while no output resource and no path are available.
    """

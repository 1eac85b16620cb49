"""metalog/__init__.py - Public API for the MetaLog package.

MetaLog writes severity-tagged, column-aligned log lines and box-drawing
exception trees to a single file or stream, safely from any number of
threads.

Quick start:
    from metalog import LogWriter, Severity

    log = LogWriter("app.log", min_severity=Severity.DEBUG)
    log.info("job started")
    # [Info]     [2024-01-15 12:34:56.789] [jobs.run:12]:                        job started

    try:
        run()
    except Exception as exc:
        log.log_exception(Severity.ERROR, exc)

    future = log.log_async(Severity.WARNING, "slow request")  # written on a worker
    future.result()

    log.close()

Exported names:
    LogWriter:        Thread-safe writer owning the output file or borrowing a stream.
    Severity:         Ordered severity levels (DEBUG < INFO < WARNING < ERROR < CRITICAL).
    MetaLogHandler:   logging.Handler that routes stdlib records into a LogWriter.
    CallerInfo:       Explicit source location for a log call.
    ExceptionNode:    Captured exception chain, renderable without the live exception.
    format_message:   Renders one log line.
    render_exception: Renders an exception chain as a tree.
    build_tree:       Draws arbitrary lines as a box-drawing tree.
    recommended_log_file: Default ``<app-data>/MetaLog/<component>.log`` path.
    censor:           Masks the tail of a sensitive string.
"""

from .caller import CallerInfo
from .errors import ConfigurationError, InvalidStateError, MetaLogError
from .formatter import format_message
from .handler import MetaLogHandler
from .paths import recommended_log_file
from .severity import Severity
from .text import censor
from .tree import ExceptionNode, build_tree, render_exception
from .writer import LogWriter

__all__ = [
    "LogWriter",
    "Severity",
    "MetaLogHandler",
    "CallerInfo",
    "ExceptionNode",
    "format_message",
    "render_exception",
    "build_tree",
    "recommended_log_file",
    "censor",
    "MetaLogError",
    "ConfigurationError",
    "InvalidStateError",
]
__version__ = "0.1.0"

"""handler.py - Bridge from the standard ``logging`` module to a LogWriter.

Applications that already log through ``logging`` can route those records
into a MetaLog file without touching their call sites::

    import logging
    from metalog import LogWriter, MetaLogHandler

    writer = LogWriter("/var/log/app.log")
    logging.getLogger().addHandler(MetaLogHandler(writer))

    logger = logging.getLogger(__name__)
    logger.warning("disk almost full")       # written as a [Warning] line
    try:
        1 / 0
    except ZeroDivisionError:
        logger.exception("division failed")  # written as an exception tree

Records keep their own source location: the caller column shows the
record's ``pathname``, ``funcName`` and ``lineno``, not the handler's.
"""

import logging

from .caller import CallerInfo
from .severity import Severity
from .writer import LogWriter


class MetaLogHandler(logging.Handler):
    """A logging.Handler that writes every record through a LogWriter.

    The writer is borrowed: closing the handler does not close it, so one
    writer can serve several handlers and direct calls at the same time.

    Thread-safety:
        ``logging.Handler`` serializes ``emit()`` per handler, and the
        writer serializes writes across everything that shares it.

    Attributes:
        writer (LogWriter): Destination of the records.
    """

    def __init__(self, writer: LogWriter, level: int = logging.NOTSET) -> None:
        super().__init__(level)
        self.writer = writer

    def emit(self, record: logging.LogRecord) -> None:
        """Write ``record`` as a MetaLog entry.

        Every record becomes exactly one entry. A record carrying exception
        info is written as its message followed by the exception tree, so
        no other thread's line can land between the two.

        Failures are reported through ``handleError()`` so a broken log file
        never takes the application down.
        """
        try:
            severity = Severity.from_logging_level(record.levelno)
            if not self.writer.is_enabled_for(severity):
                return
            caller = CallerInfo(record.pathname, record.funcName, record.lineno)
            exc = record.exc_info[1] if record.exc_info else None
            if exc is not None:
                self.writer.log_exception(severity, exc, caller=caller, message=record.getMessage())
            else:
                self.writer.log(severity, record.getMessage(), caller=caller)
        except Exception:
            self.handleError(record)

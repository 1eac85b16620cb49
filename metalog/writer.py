"""writer.py - Thread-safe single-sink log writer.

LogWriter is the heart of MetaLog. It owns exactly one output resource (a
file it opened itself, or a stream the caller lent it), filters entries by
severity, formats them and writes each one as a single, uninterleaved chunk.

Design contract:
    - The severity filter runs before any formatting or I/O. A suppressed
      call never touches the resource and therefore never fails.
    - One ``threading.Lock`` guards both the resource lifecycle and every
      write. A ``configure()`` that swaps the file waits for an in-flight
      write, and a write issued after it returns lands in the new file.
    - Files are opened in binary append mode and every entry is encoded with
      the configured encoding, so the ``\\n`` terminator is written as-is on
      every platform.
    - In persistent mode (``use_stream=True``, the default for path targets)
      the file stays open until ``close()``; otherwise it is opened and
      closed around each write, leaving it unlocked for other processes.

Typical usage::

    from metalog import LogWriter, Severity

    with LogWriter("/var/log/app.log", min_severity=Severity.WARNING) as log:
        log.info("ignored")                  # below the minimum severity
        log.error("payment failed")
        try:
            charge()
        except Exception as exc:
            log.log_exception(Severity.CRITICAL, exc)
"""

import codecs
import io
import logging
import os
import threading
from concurrent.futures import Executor, Future
from datetime import datetime
from typing import Any, Callable, Optional, Union

from .caller import CallerInfo, capture_caller
from .errors import ConfigurationError, InvalidStateError
from .formatter import format_message
from .paths import recommended_log_file
from .severity import Severity
from .text import NEWLINE, indent as indent_text
from .tree import render_exception

_log = logging.getLogger(__name__)

EXCEPTION_HEADER = "BEGIN EXCEPTION TREE:"
DEFAULT_INDENT = 2
DEFAULT_ENCODING = "utf-8"

PathType = Union[str, bytes, "os.PathLike[str]"]


class _Unset:
    def __repr__(self) -> str:  # pragma: no cover
        return "UNSET"


UNSET: Any = _Unset()


# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------


def _is_path(target: Any) -> bool:
    return isinstance(target, (str, bytes, os.PathLike))


def _check_path(path: Any) -> str:
    if not _is_path(path):
        raise ConfigurationError(f"log path must be a str or path-like object, got {path!r}")
    path = os.fsdecode(os.fspath(path))
    if not path.strip():
        raise ConfigurationError("log path must not be empty")
    return path


def _check_encoding(encoding: Optional[str]) -> str:
    if encoding is None:
        raise ConfigurationError("encoding must not be None")
    try:
        info = codecs.lookup(encoding)
    except LookupError:
        raise ConfigurationError(f"unknown encoding: {encoding!r}") from None
    if info.incrementalencoder is None:
        raise ConfigurationError(f"encoding {encoding!r} has no incremental encoder")
    return encoding


def _check_severity(value: Any) -> Severity:
    try:
        return Severity.parse(value)
    except ValueError as exc:
        raise ConfigurationError(str(exc)) from None


def _check_stream(stream: Any) -> None:
    if stream is None:
        raise ConfigurationError("stream must not be None")
    if not callable(getattr(stream, "write", None)):
        raise ConfigurationError(f"{stream!r} has no write() method")
    if getattr(stream, "closed", False):
        raise ConfigurationError("stream is closed")
    writable = getattr(stream, "writable", None)
    if writable is not None and not writable():
        raise ConfigurationError("stream is not writable")


def _open_append(path: str):
    return open(path, "ab")


def _position(resource: Any) -> int:
    try:
        return resource.tell()
    except (AttributeError, OSError, ValueError):
        return 0


def _completed() -> Future:
    future: Future = Future()
    future.set_result(None)
    return future


class LogWriter:
    """Writes formatted, severity-filtered log entries to one file or stream.

    Args:
        target: Where to write. A path (``str`` or path-like) is opened in
            append mode and owned by the writer, which closes it on
            ``close()``. A writable stream is borrowed and never closed;
            binary streams receive encoded bytes and text streams (any
            ``io.TextIOBase``) receive ``str``. ``None`` selects
            ``recommended_log_file()``.
        min_severity: Entries below this severity are dropped. Accepts a
            Severity, its value, or its name.
        encoding: Encoding used to turn entries into bytes.
        clock: Zero-argument callable returning the local ``datetime`` used
            for timestamps. Defaults to ``datetime.now``.
        executor: Optional ``concurrent.futures.Executor`` for the async
            operations. Without one, every async call gets its own
            short-lived worker thread.

    Raises:
        ConfigurationError: Bad encoding, severity, path or stream.
        OSError: The file could not be opened.
    """

    def __init__(
        self,
        target: Any = None,
        min_severity: Union[Severity, int, str] = Severity.INFO,
        encoding: Optional[str] = DEFAULT_ENCODING,
        clock: Optional[Callable[[], datetime]] = None,
        executor: Optional[Executor] = None,
    ) -> None:
        self._lock = threading.Lock()
        self._min_severity = _check_severity(min_severity)
        self._encoding = _check_encoding(encoding)
        self._clock = clock or datetime.now
        self._executor = executor
        self._closed = False
        self._use_stream = True
        self._encoder: Optional[codecs.IncrementalEncoder] = None

        if target is None:
            target = recommended_log_file()
        if _is_path(target):
            self._path: Optional[str] = _check_path(target)
            self._resource = _open_append(self._path)
            self._owns_resource = True
            _log.debug("opened log file %s", self._path)
        else:
            _check_stream(target)
            self._path = None
            self._resource = target
            self._owns_resource = False

    # ---------------------------------------------------------------------- #
    # Configuration
    # ---------------------------------------------------------------------- #

    def configure(
        self,
        path: Any = UNSET,
        use_stream: Any = UNSET,
        min_severity: Any = UNSET,
        encoding: Any = UNSET,
    ) -> None:
        """Change one or more settings; omitted arguments keep their value.

        When ``path`` or ``use_stream`` actually changes, the output resource
        is replaced under the write lock: if ``use_stream`` is on and
        ``path`` is not ``None`` the new file is opened in append mode, then
        the previous resource is released (closed if the writer owned it,
        simply dropped if it was a borrowed stream). Passing the current
        value is a no-op and does not reopen anything.

        Every value is validated and the new file opened before any state
        changes, so a failing call leaves the writer exactly as it was.

        Args:
            path: New log file path, or ``None`` to write nowhere until a
                path is configured again.
            use_stream: Keep the file open between writes (True) or open and
                close it around every write (False).
            min_severity: New minimum severity.
            encoding: New encoding for subsequent writes.

        Raises:
            ConfigurationError: An invalid value was supplied.
            InvalidStateError: The writer is closed.
            OSError: The new file could not be opened.
        """
        if min_severity is not UNSET:
            min_severity = _check_severity(min_severity)
        if encoding is not UNSET:
            encoding = _check_encoding(encoding)
        if path is not UNSET and path is not None:
            path = _check_path(path)
        if use_stream is not UNSET:
            use_stream = bool(use_stream)

        reopened = False
        with self._lock:
            if self._closed:
                raise InvalidStateError("cannot configure a closed LogWriter")
            new_path = self._path if path is UNSET else path
            new_use_stream = self._use_stream if use_stream is UNSET else use_stream

            if new_path != self._path or new_use_stream != self._use_stream:
                resource = None
                if new_use_stream and new_path is not None:
                    resource = _open_append(new_path)
                old, old_owned = self._resource, self._owns_resource
                self._resource = resource
                self._owns_resource = resource is not None
                self._path = new_path
                self._use_stream = new_use_stream
                self._encoder = None
                reopened = True
                if old is not None and old_owned:
                    old.close()

            if min_severity is not UNSET:
                self._min_severity = min_severity
            if encoding is not UNSET and encoding != self._encoding:
                self._encoding = encoding
                self._encoder = None

        if reopened:
            _log.debug(
                "log resource switched to %s (use_stream=%s)", new_path, new_use_stream
            )

    @property
    def path(self) -> Optional[str]:
        """Current log file path; ``None`` for a stream target."""
        return self._path

    @path.setter
    def path(self, value: Optional[PathType]) -> None:
        self.configure(path=value)

    @property
    def use_stream(self) -> bool:
        return self._use_stream

    @use_stream.setter
    def use_stream(self, value: bool) -> None:
        self.configure(use_stream=value)

    @property
    def min_severity(self) -> Severity:
        return self._min_severity

    @min_severity.setter
    def min_severity(self, value: Union[Severity, int, str]) -> None:
        self.configure(min_severity=value)

    @property
    def encoding(self) -> str:
        return self._encoding

    @encoding.setter
    def encoding(self, value: str) -> None:
        self.configure(encoding=value)

    @property
    def closed(self) -> bool:
        return self._closed

    def is_enabled_for(self, severity: Severity) -> bool:
        """Return True if an entry of ``severity`` would be written."""
        return severity >= self._min_severity

    # ---------------------------------------------------------------------- #
    # Synchronous logging
    # ---------------------------------------------------------------------- #

    def log(
        self,
        severity: Severity,
        message: Any,
        *,
        caller: Optional[CallerInfo] = None,
        stacklevel: int = 1,
    ) -> None:
        """Write one entry if ``severity`` passes the filter.

        Args:
            severity: Severity of the entry.
            message: Text to log. An exception is logged as an exception
                tree, as by ``log_exception()`` with the default indent.
            caller: Source location to report. Captured from the stack when
                omitted.
            stacklevel: Frames to skip when capturing the caller, as in the
                standard ``logging`` module.

        Raises:
            InvalidStateError: The writer is closed or has nowhere to write.
            OSError: The write failed.
        """
        if severity < self._min_severity:
            return
        if caller is None:
            caller = capture_caller(stacklevel)
        if isinstance(message, BaseException):
            self._write_exception(severity, message, DEFAULT_INDENT, caller)
        else:
            self._write_text(severity, message, caller)

    def log_exception(
        self,
        severity: Severity,
        exception: BaseException,
        indent: int = DEFAULT_INDENT,
        *,
        caller: Optional[CallerInfo] = None,
        stacklevel: int = 1,
        message: Any = None,
    ) -> None:
        """Write ``exception`` and its chain as a ``BEGIN EXCEPTION TREE:`` entry.

        The rendered tree is indented by ``indent`` spaces below the header
        line. When ``message`` is given it opens the entry, on the line above
        the header, so both land in the same single write. See ``log()`` for
        the remaining arguments.
        """
        if severity < self._min_severity:
            return
        if caller is None:
            caller = capture_caller(stacklevel)
        self._write_exception(severity, exception, indent, caller, message)

    def debug(self, message: Any, *, caller: Optional[CallerInfo] = None, stacklevel: int = 1) -> None:
        self.log(Severity.DEBUG, message, caller=caller, stacklevel=stacklevel + 1)

    def info(self, message: Any, *, caller: Optional[CallerInfo] = None, stacklevel: int = 1) -> None:
        self.log(Severity.INFO, message, caller=caller, stacklevel=stacklevel + 1)

    def warning(self, message: Any, *, caller: Optional[CallerInfo] = None, stacklevel: int = 1) -> None:
        self.log(Severity.WARNING, message, caller=caller, stacklevel=stacklevel + 1)

    def error(self, message: Any, *, caller: Optional[CallerInfo] = None, stacklevel: int = 1) -> None:
        self.log(Severity.ERROR, message, caller=caller, stacklevel=stacklevel + 1)

    def critical(self, message: Any, *, caller: Optional[CallerInfo] = None, stacklevel: int = 1) -> None:
        self.log(Severity.CRITICAL, message, caller=caller, stacklevel=stacklevel + 1)

    # ---------------------------------------------------------------------- #
    # Asynchronous logging
    # ---------------------------------------------------------------------- #

    def log_async(
        self,
        severity: Severity,
        message: Any,
        *,
        caller: Optional[CallerInfo] = None,
        stacklevel: int = 1,
    ) -> Future:
        """Like ``log()``, but format and write on a worker.

        The caller location is captured on the calling thread. The returned
        future resolves to ``None`` once the entry is written, or holds the
        exception the synchronous call would have raised. A call below the
        minimum severity returns an already completed future and starts no
        work. Wrap the future with ``asyncio.wrap_future()`` to await it.
        """
        if severity < self._min_severity:
            return _completed()
        if caller is None:
            caller = capture_caller(stacklevel)
        if isinstance(message, BaseException):
            return self._submit(self._write_exception, severity, message, DEFAULT_INDENT, caller)
        return self._submit(self._write_text, severity, message, caller)

    def log_exception_async(
        self,
        severity: Severity,
        exception: BaseException,
        indent: int = DEFAULT_INDENT,
        *,
        caller: Optional[CallerInfo] = None,
        stacklevel: int = 1,
        message: Any = None,
    ) -> Future:
        """Asynchronous counterpart of ``log_exception()``; see ``log_async()``."""
        if severity < self._min_severity:
            return _completed()
        if caller is None:
            caller = capture_caller(stacklevel)
        return self._submit(self._write_exception, severity, exception, indent, caller, message)

    def _submit(self, fn: Callable[..., None], *args: Any) -> Future:
        if self._executor is not None:
            return self._executor.submit(fn, *args)

        future: Future = Future()
        # Running futures cannot be cancelled; the write always completes.
        future.set_running_or_notify_cancel()

        def run() -> None:
            try:
                fn(*args)
            except BaseException as exc:
                future.set_exception(exc)
            else:
                future.set_result(None)

        try:
            threading.Thread(target=run, name="metalog-writer").start()
        except RuntimeError as exc:
            future.set_exception(exc)
        return future

    # ---------------------------------------------------------------------- #
    # Lifecycle
    # ---------------------------------------------------------------------- #

    def close(self) -> None:
        """Release the output resource and refuse further writes.

        A file opened by the writer is closed; a borrowed stream is left
        open. Calling ``close()`` again does nothing.
        """
        with self._lock:
            if self._closed:
                return
            resource, owned = self._resource, self._owns_resource
            self._resource = None
            self._owns_resource = False
            self._encoder = None
            self._closed = True
            if resource is not None and owned:
                resource.close()
        _log.debug("log writer for %s closed", self._path or "stream")

    def __enter__(self) -> "LogWriter":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __repr__(self) -> str:
        target = self._path if self._path is not None else "stream"
        state = "closed" if self._closed else self._min_severity.label
        return f"<LogWriter {target!r} ({state})>"

    # ---------------------------------------------------------------------- #
    # Private helpers
    # ---------------------------------------------------------------------- #

    def _write_text(self, severity: Severity, text: Any, caller: CallerInfo) -> None:
        line = format_message(
            Severity(severity), str(text), caller.file, caller.member, caller.line, self._clock()
        )
        self._write(line)

    def _write_exception(
        self,
        severity: Severity,
        exception: BaseException,
        indent: int,
        caller: CallerInfo,
        message: Any = None,
    ) -> None:
        tree = indent_text(render_exception(exception), indent)
        text = f"{EXCEPTION_HEADER}{NEWLINE}{tree}"
        if message is not None:
            text = f"{message}{NEWLINE}{text}"
        self._write_text(severity, text, caller)

    def _write(self, line: str) -> None:
        with self._lock:
            if self._closed:
                raise InvalidStateError("cannot write to a closed LogWriter")
            if self._use_stream:
                if self._resource is None:
                    raise InvalidStateError("LogWriter has no open output resource")
                if self._encoder is None:
                    self._encoder = self._new_encoder(self._resource)
                self._emit(self._resource, line, self._encoder)
            else:
                if self._path is None:
                    raise InvalidStateError("LogWriter has no log path configured")
                with _open_append(self._path) as f:
                    self._emit(f, line, self._new_encoder(f))

    def _new_encoder(self, resource) -> codecs.IncrementalEncoder:
        # BOM-writing codecs (utf-16, utf-32, utf-8-sig) emit their mark once
        # per encoder; a sink that already holds data must not get another.
        encoder = codecs.getincrementalencoder(self._encoding)()
        if _position(resource) > 0:
            encoder.setstate(0)
        return encoder

    def _emit(self, resource, line: str, encoder: codecs.IncrementalEncoder) -> None:
        if isinstance(resource, io.TextIOBase):
            resource.write(line)
        else:
            resource.write(encoder.encode(line))
        flush = getattr(resource, "flush", None)
        if flush is not None:
            flush()

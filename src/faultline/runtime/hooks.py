"""Registration with the interpreter's error and exit hooks.

``RuntimeHooks`` plays the part of the host runtime: it swaps in handlers for
``sys.excepthook``, ``threading.excepthook`` and ``warnings.showwarning``,
registers an ``atexit`` callback, and remembers the last error it saw so the
shutdown path can ask for it.

Uncaught exceptions in the main thread are only recorded (as FATAL); they are
reported from the exit callback, after the interpreter has printed the
traceback. Thread exceptions and warnings are reported immediately.
"""

from __future__ import annotations

import atexit
import reprlib
import sys
import threading
import traceback
from types import FrameType, TracebackType
from typing import Any, Callable, Protocol
import warnings

from ..models.error_event import LastError
from ..models.severity import Severity


class ErrorHandler(Protocol):
    def on_runtime_error(
        self,
        severity: Severity,
        message: str,
        file: str,
        line: int,
        context: dict[str, str] | None = None,
        *,
        exc: BaseException | None = None,
    ) -> list[str]: ...

    def on_process_shutdown(self) -> list[str]: ...


_repr = reprlib.Repr()
_repr.maxstring = 200
_repr.maxother = 200
_repr.maxlevel = 3


def snapshot_locals(frame: FrameType | None) -> dict[str, str]:
    if frame is None:
        return {}
    return {
        name: _repr.repr(value)
        for name, value in frame.f_locals.items()
        if not (name.startswith("__") and name.endswith("__"))
    }


def innermost_frame(tb: TracebackType | None) -> FrameType | None:
    frame = None
    while tb is not None:
        frame = tb.tb_frame
        tb = tb.tb_next
    return frame


def exception_origin(exc: BaseException) -> tuple[str, int]:
    frames = traceback.extract_tb(exc.__traceback__)
    if not frames:
        return "<unknown>", 0
    last = frames[-1]
    return last.filename, int(last.lineno or 0)


def describe(exc: BaseException) -> str:
    text = str(exc)
    return f"{type(exc).__name__}: {text}" if text else type(exc).__name__


class RuntimeHooks:
    def __init__(self, sticky: frozenset[Severity] = frozenset({Severity.FATAL})) -> None:
        self.handler: ErrorHandler | None = None
        self.sticky = frozenset(sticky)
        self._last_error: LastError | None = None
        self._lock = threading.Lock()
        self._local = threading.local()
        self._prev_excepthook: Callable[..., Any] | None = None
        self._prev_threading_hook: Callable[..., Any] | None = None
        self._prev_showwarning: Callable[..., Any] | None = None
        self._installed = False

    @property
    def installed(self) -> bool:
        return self._installed

    def install(self, handler: ErrorHandler) -> None:
        if self._installed:
            raise RuntimeError("runtime hooks already installed")
        self.handler = handler
        self._prev_excepthook = sys.excepthook
        self._prev_threading_hook = threading.excepthook
        self._prev_showwarning = warnings.showwarning
        sys.excepthook = self.handle_exception
        threading.excepthook = self.handle_thread_exception
        warnings.showwarning = self.handle_warning
        atexit.register(self.handle_shutdown)
        self._installed = True

    def uninstall(self) -> None:
        if not self._installed:
            return
        if sys.excepthook == self.handle_exception:
            sys.excepthook = self._prev_excepthook or sys.__excepthook__
        if threading.excepthook == self.handle_thread_exception:
            threading.excepthook = self._prev_threading_hook or threading.__excepthook__
        if warnings.showwarning == self.handle_warning:
            warnings.showwarning = self._prev_showwarning
        atexit.unregister(self.handle_shutdown)
        self._installed = False

    def last_error(self) -> LastError | None:
        with self._lock:
            return self._last_error

    def record(self, error: LastError) -> None:
        # A fatal record survives later non-fatal ones until the exit callback reads it.
        with self._lock:
            current = self._last_error
            if current is not None and current.severity in self.sticky and error.severity not in self.sticky:
                return
            self._last_error = error

    def handle_exception(
        self,
        exc_type: type[BaseException],
        exc: BaseException,
        tb: TracebackType | None,
    ) -> None:
        if not issubclass(exc_type, KeyboardInterrupt):
            if exc.__traceback__ is None and tb is not None:
                exc = exc.with_traceback(tb)
            file, line = exception_origin(exc)
            self.record(LastError(severity=Severity.FATAL, message=describe(exc), file=file, line=line, exc=exc))
        previous = self._prev_excepthook or sys.__excepthook__
        previous(exc_type, exc, tb)

    def handle_thread_exception(self, args: threading.ExceptHookArgs) -> None:
        exc = args.exc_value
        if exc is not None and not issubclass(args.exc_type, SystemExit):
            file, line = exception_origin(exc)
            message = describe(exc)
            if args.thread is not None:
                message = f"[thread {args.thread.name}] {message}"
            self.record(LastError(severity=Severity.ERROR, message=message, file=file, line=line, exc=exc))
            context = snapshot_locals(innermost_frame(args.exc_traceback))
            self._dispatch(Severity.ERROR, message, file, line, context, exc=exc)
        previous = self._prev_threading_hook or threading.__excepthook__
        previous(args)

    def handle_warning(
        self,
        message: Warning | str,
        category: type[Warning],
        filename: str,
        lineno: int,
        file: Any = None,
        line: str | None = None,
    ) -> None:
        severity = Severity.from_warning(category)
        text = f"{category.__name__}: {message}"
        self.record(LastError(severity=severity, message=text, file=filename, line=lineno))
        context = snapshot_locals(_find_frame(filename, lineno))
        self._dispatch(severity, text, filename, lineno, context)
        if self._prev_showwarning is not None:
            self._prev_showwarning(message, category, filename, lineno, file, line)

    def handle_shutdown(self) -> None:
        if self.handler is None or self._busy():
            return
        self._local.busy = True
        try:
            self.handler.on_process_shutdown()
        finally:
            self._local.busy = False

    def _dispatch(
        self,
        severity: Severity,
        message: str,
        file: str,
        line: int,
        context: dict[str, str],
        *,
        exc: BaseException | None = None,
    ) -> None:
        # Errors raised by the sinks themselves are not fed back into dispatch.
        if self.handler is None or self._busy():
            return
        self._local.busy = True
        try:
            self.handler.on_runtime_error(severity, message, file, line, context, exc=exc)
        finally:
            self._local.busy = False

    def _busy(self) -> bool:
        return bool(getattr(self._local, "busy", False))


def _find_frame(filename: str, lineno: int) -> FrameType | None:
    frame = sys._getframe(1)
    while frame is not None:
        if frame.f_code.co_filename == filename and frame.f_lineno == lineno:
            return frame
        frame = frame.f_back
    return None

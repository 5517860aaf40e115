"""Structured logging helpers: per-thread report context and call tracing."""

import functools
import logging
import threading
import time
from typing import Any, Callable, Dict, Optional

_state = threading.local()


def _current() -> Dict[str, Any]:
    return getattr(_state, "context", {})


def get_log_context() -> Dict[str, Any]:
    """Copy of the context fields active on the calling thread."""
    return dict(_current())


class LogContext:
    """
    Attach report identifiers to every record logged inside a block.

    The engine opens one context per report (snapshot id, task or project
    id). Contexts nest; leaving a block restores the fields of the
    enclosing one, also when the block raises. Fields set to None are
    dropped so optional ids never show up as ``null``.

    Example:
        with LogContext(snapshot_id="snap-42", task_id="task-1"):
            logger.info("Building task report")
    """

    def __init__(self, **fields):
        self.fields = {k: v for k, v in fields.items() if v is not None}
        self._saved: Optional[Dict[str, Any]] = None

    def __enter__(self):
        self._saved = _current()
        _state.context = {**self._saved, **self.fields}
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        _state.context = self._saved or {}


class ContextFilter(logging.Filter):
    """Copies the active LogContext fields onto each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in _current().items():
            setattr(record, key, value)
        return True


def _describe_call(name: str, args: tuple, kwargs: Dict[str, Any]) -> str:
    parts = [repr(a) for a in args]
    parts.extend(f"{k}={v!r}" for k, v in kwargs.items())
    return f"Entering {name} with args: {', '.join(parts)}"


def log_function_call(
    func: Optional[Callable] = None, *, include_args: bool = False, level: str = "DEBUG"
) -> Callable:
    """
    Trace entry and exit of a call.

    The exit record carries ``elapsed_ms`` so slow report builds can be
    picked out of JSON logs. Exceptions are logged with traceback and
    re-raised unchanged.

    Args:
        func: Function to decorate (when used without arguments)
        include_args: Add the call arguments to the entry record
        level: Level of the entry and exit records

    Example:
        @log_function_call
        def build_task_report(self, snapshot, task_id):
            ...
    """
    log_level = getattr(logging, level.upper())

    def decorator(f: Callable) -> Callable:
        logger = logging.getLogger(f.__module__)

        @functools.wraps(f)
        def wrapper(*args, **kwargs):
            if include_args:
                logger.log(log_level, _describe_call(f.__name__, args, kwargs))
            else:
                logger.log(log_level, f"Entering {f.__name__}")

            started = time.perf_counter()
            try:
                result = f(*args, **kwargs)
            except Exception as e:
                logger.error(
                    f"Exception in {f.__name__}: {type(e).__name__}: {e}",
                    exc_info=True,
                )
                raise

            elapsed_ms = round((time.perf_counter() - started) * 1000, 3)
            logger.log(
                log_level, f"Exiting {f.__name__}", extra={"elapsed_ms": elapsed_ms}
            )
            return result

        return wrapper

    if func is None:
        return decorator
    return decorator(func)

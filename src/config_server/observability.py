"""Structured logging helpers shared by the resolver, adapters, and HTTP layer.

Purpose
    Keep every emission of logging data predictable and contextual while
    leaving handler configuration to the process entry point.

Contents
    - ``TRACE_ID``: context variable storing the active trace identifier.
    - ``get_logger``: returns the shared package logger (quiet by default).
    - ``bind_trace_id`` / ``new_trace_id``: bind, clear, or mint identifiers.
    - ``log_debug`` / ``log_info`` / ``log_error``: emit structured entries via a
      single private emitter.
    - ``make_event``: convenience builder for structured event payloads.
    - ``ContextFormatter`` / ``configure_logging``: stderr rendering used by the
      CLI when it boots the service.

System Integration
    Library modules only call the ``log_*`` helpers. The CLI calls
    :func:`configure_logging` once before resolving the configuration, and the
    HTTP middleware binds a fresh trace id per request so concurrent requests
    keep their own identifiers.
"""

from __future__ import annotations

import logging
import os
import sys
import uuid
from contextvars import ContextVar
from typing import Any, Final, Mapping, TextIO

TRACE_ID: ContextVar[str | None] = ContextVar("config_server_trace_id", default=None)
"""Current trace identifier propagated through logging helpers."""

LOG_LEVEL_ENV: Final[str] = "CONFIG_SERVER_LOG"
"""Environment variable holding the log level name used by :func:`configure_logging`."""

DEFAULT_LOG_LEVEL: Final[str] = "DEBUG"

_LOG_FORMAT: Final[str] = "%(asctime)s %(levelname)-5s %(name)s: %(message)s"

_LOGGER: Final[logging.Logger] = logging.getLogger("config_server")
_LOGGER.addHandler(logging.NullHandler())


def get_logger() -> logging.Logger:
    """Expose the package logger so applications may attach handlers.

    Why
        Leaves the package silent by default while giving the host process full
        control over handler and formatter configuration.
    """

    return _LOGGER


def bind_trace_id(trace_id: str | None) -> None:
    """Bind or clear the active trace identifier.

    Examples
    --------
    >>> bind_trace_id('abc123')
    >>> TRACE_ID.get()
    'abc123'
    >>> bind_trace_id(None)
    >>> TRACE_ID.get() is None
    True
    """

    TRACE_ID.set(trace_id)


def new_trace_id() -> str:
    """Return a fresh random trace identifier (32 lowercase hex characters).

    Examples
    --------
    >>> len(new_trace_id())
    32
    """

    return uuid.uuid4().hex


def log_debug(message: str, **fields: Any) -> None:
    """Emit a structured debug log entry that includes the trace context."""

    _emit(logging.DEBUG, message, fields)


def log_info(message: str, **fields: Any) -> None:
    """Emit a structured info log entry that includes the trace context."""

    _emit(logging.INFO, message, fields)


def log_error(message: str, **fields: Any) -> None:
    """Emit a structured error log entry that includes the trace context."""

    _emit(logging.ERROR, message, fields)


def make_event(
    layer: str,
    path: str | None,
    payload: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """Build a structured logging payload for configuration lifecycle events.

    Why
        Keeps event construction consistent so log readers can rely on stable
        keys.
    Inputs
        layer: Subsystem producing the event (``"file"``, ``"resolver"``, ``"http"``).
        path: Filesystem path or request path associated with the event.
        payload: Optional mapping with extra diagnostic detail.

    Examples
    --------
    >>> make_event('resolver', None, {'count': 3})
    {'layer': 'resolver', 'path': None, 'count': 3}
    """

    event: dict[str, Any] = {"layer": layer, "path": path}
    if payload:
        event |= dict(payload)
    return event


class ContextFormatter(logging.Formatter):
    """Render the structured ``context`` attached by :func:`_emit` as ``key=value`` pairs.

    Records without a context (third-party loggers) are rendered unchanged.
    """

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = getattr(record, "context", None)
        if not context:
            return line
        rendered = " ".join(f"{key}={value}" for key, value in context.items() if value is not None)
        return f"{line} {rendered}" if rendered else line


def resolve_level(name: str | None) -> int:
    """Translate a level name into a :mod:`logging` level.

    Unknown names fall back to ``INFO``; an unset value uses
    :data:`DEFAULT_LOG_LEVEL`.

    Examples
    --------
    >>> resolve_level("warning") == logging.WARNING
    True
    >>> resolve_level("chatty") == logging.INFO
    True
    >>> resolve_level(None) == logging.DEBUG
    True
    """

    candidate = (name or DEFAULT_LOG_LEVEL).strip().upper()
    level = logging.getLevelName(candidate)
    return level if isinstance(level, int) else logging.INFO


def configure_logging(
    level: int | str | None = None,
    *,
    stream: TextIO | None = None,
) -> logging.Handler:
    """Attach a single stderr handler to the package logger and return it.

    Why
        The service is its own host application; somebody has to turn the
        quiet package logger into visible output at boot.
    What
        Replaces handlers previously installed by this function, keeps the
        ``NullHandler``, and sets the level from *level* or the
        :data:`LOG_LEVEL_ENV` environment variable.
    Side Effects
        Mutates the ``config_server`` logger's handlers and level.
    """

    if level is None:
        resolved = resolve_level(os.environ.get(LOG_LEVEL_ENV))
    elif isinstance(level, str):
        resolved = resolve_level(level)
    else:
        resolved = level

    for existing in list(_LOGGER.handlers):
        if getattr(existing, "_config_server_handler", False):
            _LOGGER.removeHandler(existing)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(ContextFormatter(_LOG_FORMAT))
    handler._config_server_handler = True  # type: ignore[attr-defined]
    _LOGGER.addHandler(handler)
    _LOGGER.setLevel(resolved)
    return handler


def _emit(level: int, message: str, fields: Mapping[str, Any]) -> None:
    """Send a log entry through the shared logger with contextual metadata."""

    _LOGGER.log(level, message, extra={"context": _with_trace(fields)})


def _with_trace(fields: Mapping[str, Any]) -> dict[str, Any]:
    """Attach the current trace identifier to the provided structured fields."""

    context = {"trace_id": TRACE_ID.get()}
    context.update(fields)
    return context

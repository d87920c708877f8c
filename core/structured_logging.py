"""Structured logging helpers with request correlation context."""

from __future__ import annotations

import contextvars
import logging
import uuid
from contextlib import contextmanager
from typing import Iterator

_REQUEST_ID_VAR: contextvars.ContextVar[str] = contextvars.ContextVar(
    "request_id", default="-"
)
_PHASE_VAR: contextvars.ContextVar[str] = contextvars.ContextVar(
    "phase", default="-"
)


class _RequestContextFilter(logging.Filter):
    """Inject request correlation fields into all log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = _REQUEST_ID_VAR.get("-")
        record.phase = _PHASE_VAR.get("-")
        return True


def _ensure_filter_on_root_handlers() -> None:
    root_logger = logging.getLogger()
    for handler in root_logger.handlers:
        has_filter = any(isinstance(f, _RequestContextFilter) for f in handler.filters)
        if not has_filter:
            handler.addFilter(_RequestContextFilter())


def configure_structured_logging(level: int | str = logging.INFO) -> None:
    """Configure root logging format with request/phase context."""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    fmt = (
        "%(asctime)s | %(levelname)s | request_id=%(request_id)s | "
        "phase=%(phase)s | %(name)s | %(message)s"
    )
    root_logger = logging.getLogger()
    if not root_logger.handlers:
        logging.basicConfig(level=level, format=fmt)
    else:
        root_logger.setLevel(level)
        formatter = logging.Formatter(fmt)
        for handler in root_logger.handlers:
            handler.setFormatter(formatter)
    _ensure_filter_on_root_handlers()


def set_request_id(request_id: str | None = None) -> str:
    """Set or generate the request correlation ID."""
    value = request_id or uuid.uuid4().hex[:12]
    _REQUEST_ID_VAR.set(value)
    return value


def get_request_id() -> str:
    """Get the current request correlation ID."""
    return _REQUEST_ID_VAR.get("-")


def get_phase() -> str:
    return _PHASE_VAR.get("-")


@contextmanager
def request_scope(request_id: str | None = None) -> Iterator[str]:
    """Bind a request ID for the duration of one parse request."""
    token = _REQUEST_ID_VAR.set(request_id or uuid.uuid4().hex[:12])
    try:
        yield _REQUEST_ID_VAR.get()
    finally:
        _REQUEST_ID_VAR.reset(token)


@contextmanager
def phase_scope(phase: str) -> Iterator[None]:
    """Temporarily set phase context for emitted logs."""
    token = _PHASE_VAR.set(phase)
    try:
        yield
    finally:
        _PHASE_VAR.reset(token)

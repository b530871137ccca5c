"""
Ids that follow one API request through logs, error reports and the
calls it makes to the image and notification functions.

``bind`` stores them in contextvars and in structlog's bound context, so
every log line written while handling the request carries them without
being passed around. ``reset`` clears both at the end of the request.
"""

import uuid
from contextvars import ContextVar
from typing import Dict, Optional

import structlog

_request_id: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
_correlation_id: ContextVar[Optional[str]] = ContextVar("correlation_id", default=None)
_identity: ContextVar[Optional[str]] = ContextVar("identity", default=None)

_VARS = {"request_id": _request_id, "correlation_id": _correlation_id, "identity": _identity}


def new_request_id() -> str:
    """``req_`` followed by 16 hex chars."""
    return f"req_{uuid.uuid4().hex[:16]}"


def bind(**ids: Optional[str]) -> None:
    """
    Set any of ``request_id``, ``correlation_id`` or ``identity``.

    None values are skipped. Other keyword arguments (path, method) only go
    to the log context.
    """
    values = {key: value for key, value in ids.items() if value is not None}
    for key, value in values.items():
        if key in _VARS:
            _VARS[key].set(value)
    structlog.contextvars.bind_contextvars(**values)


def reset() -> None:
    for var in _VARS.values():
        var.set(None)
    structlog.contextvars.clear_contextvars()


def outbound_correlation_id() -> Optional[str]:
    """Id to send to the functions: the caller's correlation id, else our request id."""
    return _correlation_id.get() or _request_id.get()


def snapshot() -> Dict[str, Optional[str]]:
    return {key: var.get() for key, var in _VARS.items()}

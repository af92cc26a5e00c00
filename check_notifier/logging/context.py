"""Scoped logging context backed by contextvars.

Each dispatch runs in its own asyncio task, and tasks copy the current
context when they are created, so fields pushed inside one dispatch never
leak into another.
"""

from contextvars import ContextVar, Token
from typing import Any, Dict, Optional

_log_fields: ContextVar[Dict[str, Any]] = ContextVar("check_notifier_log_fields", default={})


def get_log_context() -> Dict[str, Any]:
    """Return a copy of the fields active in the current context."""
    return dict(_log_fields.get())


def push_log_context(**fields) -> Token:
    """Merge ``fields`` into the active context and return a reset token."""
    return _log_fields.set({**_log_fields.get(), **fields})


def pop_log_context(token: Token) -> None:
    _log_fields.reset(token)


def clear_log_context() -> None:
    """Drop every field. Used by tests."""
    _log_fields.set({})


class log_context:
    """Context manager adding fields to every record logged inside it.

    Example:
        >>> with log_context(check_id="42", event_kind="down"):
        ...     logger.info("Rendering template")
    """

    def __init__(self, **fields):
        self.fields = fields
        self._token: Optional[Token] = None

    def __enter__(self):
        self._token = push_log_context(**self.fields)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self._token is not None:
            pop_log_context(self._token)
            self._token = None
        return False

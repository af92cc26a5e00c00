"""Domain models for the check notifier."""

from .models import (
    ALERT_EMAIL_PARAM,
    EDITABLE_CHECK_TYPES,
    Check,
    CheckEvent,
    EventKind,
    OutboundMessage,
    RenderedMessage,
)

__all__ = [
    "Check",
    "CheckEvent",
    "EventKind",
    "RenderedMessage",
    "OutboundMessage",
    "ALERT_EMAIL_PARAM",
    "EDITABLE_CHECK_TYPES",
]

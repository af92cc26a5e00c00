"""Result types and exceptions for the notification pipeline.

Failure taxonomy:

- NotificationTemplateError: no template for an event kind, or the template
  failed to render. A ConfigurationError; aborts one dispatch only.
- CheckLookupError: the host could not find the check an event refers to.
- InvalidRecipientError: a per-check override contains a malformed address.
  The only error surfaced synchronously, to the dashboard save flow.
- DeliveryError: the mail sender failed. Logged, never retried.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from check_notifier.config.exceptions import ConfigurationError


class NotificationError(Exception):
    """Base exception for notification-related errors."""

    pass


class NotificationTemplateError(NotificationError, ConfigurationError):
    """Raised when an event template is missing or fails to render."""

    pass


class CheckLookupError(NotificationError, LookupError):
    """Raised when the check referenced by an event cannot be loaded."""

    pass


class InvalidRecipientError(NotificationError, ValueError):
    """Raised when a submitted recipient override contains invalid addresses.

    Attributes:
        invalid: The offending entries, in submission order
    """

    def __init__(self, message: str, invalid: Optional[List[str]] = None):
        super().__init__(message)
        self.invalid = list(invalid or [])


class DeliveryError(NotificationError):
    """Raised when the mail sender fails to hand off a message."""

    pass


@dataclass(frozen=True)
class SendReceipt:
    """What a mail sender reports back after a successful hand-off."""

    transport: str
    recipients: List[str] = field(default_factory=list)
    response: Optional[str] = None


@dataclass(frozen=True)
class DispatchResult:
    """Outcome of one dispatch, for callers and tests.

    The event bus never sees this value.

    Attributes:
        check_id: Identifier of the check the event concerned
        event_kind: Raw event kind
        status: "sent", "skipped" or "failed"
        recipients: Resolved "to" value, when the pipeline got that far
        error: Error description for failed dispatches
    """

    check_id: str
    event_kind: str
    status: str
    recipients: Optional[str] = None
    error: Optional[str] = None

    def is_success(self) -> bool:
        return self.status == "sent"

"""Email notifications for check lifecycle events.

This package provides the complete notification pipeline:
- NotificationDispatcher: turns check events into one email attempt each
- should_notify: per event kind enable gate
- TemplateRenderer: Jinja2 templates, first line subject, rest body
- resolve_recipients: per-check override or configured default
- DashboardHooks: override capture and edit-form field
- Mail senders: SMTP, SES (SMTP interface) and sendmail transports
"""

from .dispatcher import NotificationDispatcher
from .filters import should_notify
from .hooks import DashboardHooks
from .models import (
    CheckLookupError,
    DeliveryError,
    DispatchResult,
    InvalidRecipientError,
    NotificationError,
    NotificationTemplateError,
    SendReceipt,
)
from .payloads import build_notification_context
from .recipients import resolve_recipients, validate_recipient_override
from .senders import (
    MailSender,
    SendmailMailSender,
    SMTPMailSender,
    build_email_message,
    build_mail_sender,
)
from .templates import TemplateRenderer

__all__ = [
    # Orchestration
    "NotificationDispatcher",
    "DashboardHooks",
    # Results
    "DispatchResult",
    "SendReceipt",
    # Exceptions
    "NotificationError",
    "NotificationTemplateError",
    "CheckLookupError",
    "InvalidRecipientError",
    "DeliveryError",
    # Components
    "should_notify",
    "TemplateRenderer",
    "resolve_recipients",
    "validate_recipient_override",
    "build_notification_context",
    # Transports
    "MailSender",
    "SMTPMailSender",
    "SendmailMailSender",
    "build_mail_sender",
    "build_email_message",
]

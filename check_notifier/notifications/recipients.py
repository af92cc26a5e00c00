"""Recipient resolution and override validation.

Overrides are validated once, when the dashboard saves them, and trusted
from then on; ``resolve_recipients`` does no validation of its own.
"""

from typing import List

from check_notifier.config.models import NotificationConfig
from check_notifier.domain.models import Check
from check_notifier.utils.addresses import is_valid_address, split_recipients

from .models import InvalidRecipientError


def resolve_recipients(check: Check, config: NotificationConfig) -> str:
    """Return the check's override verbatim, or the configured default list."""
    if check.alert_email:
        return check.alert_email
    return config.message.to


def validate_recipient_override(raw: str) -> List[str]:
    """Validate every comma-separated entry of a submitted override.

    Returns:
        The trimmed entries, in submission order

    Raises:
        InvalidRecipientError: If any entry fails the address grammar; one bad
            entry rejects the whole submission
    """
    candidates = split_recipients(raw)
    invalid = [candidate for candidate in candidates if not is_valid_address(candidate)]

    if invalid:
        shown = ", ".join(f"'{candidate}'" for candidate in invalid)
        raise InvalidRecipientError(f"Invalid email address: {shown}", invalid=invalid)

    return candidates

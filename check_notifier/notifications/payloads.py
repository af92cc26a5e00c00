"""Template context for notification emails."""

from typing import Any, Dict, Optional

from check_notifier.domain.models import Check, CheckEvent
from check_notifier.utils.timestamps import format_human, format_timestamp


def build_check_url(base_url: Optional[str], check: Check) -> Optional[str]:
    """Dashboard link for a check, or None when no base URL is configured."""
    if not base_url:
        return None
    return f"{base_url.rstrip('/')}/dashboard/checks/{check.id}"


def build_notification_context(
    check: Check,
    event: CheckEvent,
    base_url: Optional[str],
) -> Dict[str, Any]:
    """Build the variables available to every event template.

    Returns:
        Dictionary with:
        - check, event: the domain objects (``checkEvent`` is an alias)
        - url: configured base URL, or empty string
        - check_url: dashboard link for the check, or None
        - format_time: long human-readable timestamp formatter
        - format_timestamp: ISO 8601 formatter
    """
    return {
        "check": check,
        "event": event,
        "checkEvent": event,
        "url": base_url or "",
        "check_url": build_check_url(base_url, check),
        "format_time": format_human,
        "format_timestamp": format_timestamp,
    }

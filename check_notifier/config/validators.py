"""Non-fatal configuration checks."""

import warnings
from typing import Any, Dict, List


def check_for_warnings(config_dict: Dict[str, Any]) -> List[str]:
    """Return warnings for settings that are valid but probably unintended."""
    messages = []

    email = config_dict.get("email") or {}
    if not isinstance(email, dict):
        return messages

    events = email.get("event") or {}
    if isinstance(events, dict):
        if not any(events.values()):
            messages.append("No event kinds are enabled; no notification emails will be sent")

        missing = _kinds_without_template(
            [str(kind) for kind, enabled in events.items() if enabled],
            email.get("template_dir"),
        )
        if missing:
            messages.append(f"Enabled event kinds without a template: {', '.join(missing)}")

    if not config_dict.get("url"):
        messages.append("No 'url' configured; links in notification emails will be incomplete")

    return messages


def _kinds_without_template(kinds: List[str], template_dir: Any) -> List[str]:
    # Imported here: the notifications package depends on the config models.
    from check_notifier.notifications.templates import TemplateRenderer

    search_path = template_dir if isinstance(template_dir, str) else None
    renderer = TemplateRenderer(search_path=search_path)
    return sorted(kind for kind in kinds if not renderer.has_template(kind))


def emit_warnings(warning_messages: List[str]) -> None:
    for message in warning_messages:
        warnings.warn(message, UserWarning, stacklevel=2)

"""Event filtering against the configured enable map."""

from typing import Mapping


def should_notify(event_kind: str, enabled: Mapping[str, bool]) -> bool:
    """Return True only for kinds present in ``enabled`` and set to True.

    Unknown and unconfigured kinds are rejected.

    Example:
        >>> should_notify("down", {"down": True, "up": False})
        True
        >>> should_notify("restarted", {"down": True})
        False
    """
    return enabled.get(event_kind, False) is True

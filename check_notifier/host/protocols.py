"""Contracts of the monitoring host this package plugs into.

The host owns scheduling, persistence and the dashboard. The notifier only
needs the narrow surface described here.
"""

from typing import Any, Callable, List, Mapping, Optional, Protocol

from check_notifier.domain.models import Check, CheckEvent

# Dashboard hook names.
CHECK_FIELDS_SAVED = "populate_from_dirty_check"
CHECK_EDIT_FORM = "check_edit"

EventHandler = Callable[[CheckEvent], None]

# (check, dirty_fields, check_type); may raise to reject the save.
SaveHook = Callable[[Check, Mapping[str, Any], str], None]

# (check_type, check, partials); appends markup to partials.
EditFormHook = Callable[[str, Check, List[str]], None]


class EventBus(Protocol):
    """Delivers check events to subscribers, in arrival order."""

    def subscribe(self, handler: EventHandler) -> None: ...


class CheckRepository(Protocol):
    """Asynchronous check lookup backed by the host's persistence layer."""

    async def find_check(self, check_id: str) -> Optional[Check]: ...


class Dashboard(Protocol):
    """Registration point for dashboard edit-flow hooks."""

    def on(self, hook: str, handler: Callable[..., Any]) -> None: ...


class Host(Protocol):
    """Everything :func:`check_notifier.plugin.install` needs from the host."""

    event_bus: EventBus
    checks: CheckRepository
    dashboard: Dashboard

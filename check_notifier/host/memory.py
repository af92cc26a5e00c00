"""In-process implementations of the host contracts.

Useful for embedding the notifier in a small service, for the CLI's
``send-test`` command, and for tests.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional

from check_notifier.domain.models import Check, CheckEvent

from .protocols import EventHandler

logger = logging.getLogger(__name__)


class InMemoryEventBus:
    """Synchronous fan-out to subscribers in subscription order.

    A failing subscriber is logged and skipped so the remaining subscribers
    still receive the event.
    """

    def __init__(self):
        self._handlers: List[EventHandler] = []

    def subscribe(self, handler: EventHandler) -> None:
        self._handlers.append(handler)

    def publish(self, event: CheckEvent) -> None:
        for handler in list(self._handlers):
            try:
                handler(event)
            except Exception:
                logger.exception(f"Event subscriber {handler!r} failed for {event.kind} event")


class InMemoryCheckRepository:
    """Dictionary-backed check store."""

    def __init__(self, checks: Iterable[Check] = ()):
        self._checks: Dict[str, Check] = {check.id: check for check in checks}

    def add(self, check: Check) -> None:
        self._checks[check.id] = check

    async def find_check(self, check_id: str) -> Optional[Check]:
        return self._checks.get(check_id)


class InMemoryDashboard:
    """Hook registry mirroring the host dashboard's edit flow."""

    def __init__(self):
        self._hooks: Dict[str, List[Callable[..., Any]]] = defaultdict(list)

    def on(self, hook: str, handler: Callable[..., Any]) -> None:
        self._hooks[hook].append(handler)

    def emit(self, hook: str, *args: Any) -> None:
        """Run every handler for ``hook``; exceptions propagate to the caller."""
        for handler in self._hooks.get(hook, []):
            handler(*args)


@dataclass
class InMemoryHost:
    """Bundles the in-memory collaborators behind the ``Host`` contract."""

    event_bus: InMemoryEventBus = field(default_factory=InMemoryEventBus)
    checks: InMemoryCheckRepository = field(default_factory=InMemoryCheckRepository)
    dashboard: InMemoryDashboard = field(default_factory=InMemoryDashboard)

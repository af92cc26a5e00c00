"""Host integration contracts and in-memory implementations."""

from .memory import InMemoryCheckRepository, InMemoryDashboard, InMemoryEventBus, InMemoryHost
from .protocols import (
    CHECK_EDIT_FORM,
    CHECK_FIELDS_SAVED,
    CheckRepository,
    Dashboard,
    EventBus,
    Host,
)

__all__ = [
    # Contracts
    "EventBus",
    "CheckRepository",
    "Dashboard",
    "Host",
    "CHECK_FIELDS_SAVED",
    "CHECK_EDIT_FORM",
    # In-memory implementations
    "InMemoryEventBus",
    "InMemoryCheckRepository",
    "InMemoryDashboard",
    "InMemoryHost",
]

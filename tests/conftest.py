"""Shared fixtures for check notifier tests."""

import logging
from datetime import datetime, timezone

import pytest

from check_notifier.config.models import NotificationConfig
from check_notifier.domain.models import Check, CheckEvent
from check_notifier.logging.context import clear_log_context

TRANSPORT_ENV_VARS = ("SMTP_HOST", "SMTP_PORT", "SMTP_USER", "SMTP_PASS", "SES_REGION")


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep real transport credentials out of the tests."""
    for name in TRANSPORT_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    clear_log_context()
    yield
    clear_log_context()


@pytest.fixture
def restore_root_logger():
    """Undo configure_logging() changes to the root logger."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def notification_config():
    """Config with down/up enabled and a single default recipient."""
    return NotificationConfig(
        method="SMTP",
        transport={"host": "smtp.example.com", "port": 587},
        event={"up": True, "down": True, "paused": False},
        message={"from": "f@x.com", "to": "ops@x.com"},
        url="http://uptime.example.com/",
    )


@pytest.fixture
def http_check():
    return Check(
        id=1,
        name="FooBar",
        type="http",
        url="http://foobar.com",
        pollerParams={},
    )


@pytest.fixture
def down_event():
    return CheckEvent(
        kind="down",
        check_id="1",
        timestamp=datetime(1986, 9, 4, 20, 30, tzinfo=timezone.utc),
        details="Error 500",
    )


@pytest.fixture
def up_event():
    return CheckEvent(
        kind="up",
        check_id="1",
        timestamp=datetime(1986, 9, 4, 21, 0, tzinfo=timezone.utc),
    )

"""End-to-end tests for installing the notifier into a host."""

import asyncio
import logging

import pytest

from check_notifier import install
from check_notifier.host.memory import InMemoryHost
from check_notifier.host.protocols import CHECK_EDIT_FORM, CHECK_FIELDS_SAVED
from check_notifier.notifications.models import InvalidRecipientError
from tests.helpers import RecordingMailSender


@pytest.fixture
def host(http_check):
    host = InMemoryHost()
    host.checks.add(http_check)
    return host


@pytest.fixture
def sender():
    return RecordingMailSender()


def publish_and_drain(host, dispatcher, *events):
    async def scenario():
        for event in events:
            host.event_bus.publish(event)
        await dispatcher.drain()

    asyncio.run(scenario())


def test_down_event_reaches_default_recipients(host, notification_config, sender, down_event):
    dispatcher = install(host, notification_config, sender=sender)

    publish_and_drain(host, dispatcher, down_event)

    assert len(sender.sent) == 1
    assert sender.sent[0].to == "ops@x.com"
    assert sender.sent[0].subject == '[Down] Check "FooBar" just went down'
    assert "http://uptime.example.com/dashboard/checks/1" in sender.sent[0].body


def test_saved_override_is_used_for_next_event(host, notification_config, sender, http_check, down_event):
    dispatcher = install(host, notification_config, sender=sender)

    host.dashboard.emit(CHECK_FIELDS_SAVED, http_check, {"alert_email": "a@b.com, c@d.org"}, "http")
    publish_and_drain(host, dispatcher, down_event)

    assert http_check.alert_email == "a@b.com, c@d.org"
    assert sender.sent[0].to == "a@b.com, c@d.org"


def test_invalid_override_is_rejected(host, notification_config, sender, http_check, down_event):
    dispatcher = install(host, notification_config, sender=sender)

    with pytest.raises(InvalidRecipientError) as exc_info:
        host.dashboard.emit(CHECK_FIELDS_SAVED, http_check, {"alert_email": "a@b.com, bad-address"}, "http")

    assert exc_info.value.invalid == ["bad-address"]
    assert http_check.alert_email is None

    publish_and_drain(host, dispatcher, down_event)
    assert sender.sent[0].to == "ops@x.com"


def test_disabled_event_kind_sends_nothing(host, notification_config, sender, up_event):
    config = notification_config.model_copy(update={"event": {"up": False, "down": True}})
    dispatcher = install(host, config, sender=sender)

    publish_and_drain(host, dispatcher, up_event)

    assert sender.sent == []


def test_edit_form_gets_override_field(host, notification_config, sender, http_check):
    install(host, notification_config, sender=sender)
    http_check.set_poller_param("alert_email", "a@b.com")
    partials = []

    host.dashboard.emit(CHECK_EDIT_FORM, "http", http_check, partials)

    assert len(partials) == 1
    assert 'name="check[alert_email]"' in partials[0]
    assert 'value="a@b.com"' in partials[0]


def test_edit_form_skips_other_check_types(host, notification_config, sender, http_check):
    install(host, notification_config, sender=sender)
    partials = []

    host.dashboard.emit(CHECK_EDIT_FORM, "udp", http_check, partials)

    assert partials == []


def test_install_logs_enabled(host, notification_config, sender, caplog):
    caplog.set_level(logging.INFO, logger="check_notifier")

    install(host, notification_config, sender=sender)

    assert "Enabled Email notifications" in caplog.text


def test_events_from_worker_thread_use_given_loop(host, notification_config, sender, down_event):
    async def scenario():
        dispatcher = install(host, notification_config, sender=sender, loop=asyncio.get_running_loop())
        await asyncio.to_thread(host.event_bus.publish, down_event)
        await dispatcher.drain()
        return dispatcher

    dispatcher = asyncio.run(scenario())

    assert len(sender.sent) == 1
    assert sender.sent[0].to == "ops@x.com"
    assert dispatcher.pending == 0


def test_events_from_worker_thread_without_loop_are_dropped(host, notification_config, sender, down_event, caplog):
    caplog.set_level(logging.ERROR, logger="check_notifier")

    async def scenario():
        dispatcher = install(host, notification_config, sender=sender)
        await asyncio.to_thread(host.event_bus.publish, down_event)
        await dispatcher.drain()

    asyncio.run(scenario())

    assert sender.sent == []
    assert "Cannot schedule notification" in caplog.text

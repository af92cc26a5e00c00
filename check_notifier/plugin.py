"""Entry point used by the monitoring host to enable email notifications."""

import asyncio
from typing import Optional

from check_notifier.config.models import NotificationConfig
from check_notifier.host.protocols import CHECK_EDIT_FORM, CHECK_FIELDS_SAVED, Host
from check_notifier.logging import get_logger
from check_notifier.notifications.dispatcher import NotificationDispatcher
from check_notifier.notifications.hooks import DashboardHooks
from check_notifier.notifications.senders import MailSender, build_mail_sender
from check_notifier.notifications.templates import TemplateRenderer

logger = get_logger(__name__, component="plugin")


def install(
    host: Host,
    config: NotificationConfig,
    sender: Optional[MailSender] = None,
    renderer: Optional[TemplateRenderer] = None,
    loop: Optional[asyncio.AbstractEventLoop] = None,
) -> NotificationDispatcher:
    """Subscribe the dispatcher and dashboard hooks to the host.

    Events published from inside a running loop are scheduled on it. Pass
    ``loop`` when the host publishes from worker threads; those events are
    handed to that loop instead.

    Raises:
        ConfigurationError: If the transport cannot be built
    """
    renderer = renderer or TemplateRenderer(search_path=config.template_dir)
    sender = sender or build_mail_sender(config)

    dispatcher = NotificationDispatcher(config, host.checks, sender, renderer=renderer, loop=loop)
    host.event_bus.subscribe(dispatcher.handle_event)

    hooks = DashboardHooks(renderer)
    host.dashboard.on(CHECK_FIELDS_SAVED, hooks.capture_alert_email)
    host.dashboard.on(CHECK_EDIT_FORM, hooks.augment_edit_form)

    logger.info(
        "Enabled Email notifications",
        extra={
            "event": "plugin.enabled",
            "transport": config.method.value,
            "enabled_events": ",".join(config.enabled_events()),
        },
    )
    return dispatcher

"""Notification dispatcher for check lifecycle events.

Turns each admitted CheckEvent into exactly one email attempt:
filter -> check lookup -> render -> resolve recipients -> send.

The bus-facing handler only schedules the work and returns, so a slow
lookup or mail server never holds up the event stream. Every failure is
contained to its own dispatch and logged; nothing is retried and nothing
propagates back to the bus.
"""

import asyncio
import logging
from typing import Optional, Set

from check_notifier.config.models import NotificationConfig
from check_notifier.domain.models import Check, CheckEvent, OutboundMessage
from check_notifier.host.protocols import CheckRepository
from check_notifier.logging import get_logger
from check_notifier.logging.context import log_context

from .filters import should_notify
from .models import (
    CheckLookupError,
    DeliveryError,
    DispatchResult,
    NotificationTemplateError,
)
from .payloads import build_notification_context
from .recipients import resolve_recipients
from .senders import MailSender
from .templates import TemplateRenderer

logger = get_logger(__name__, component="dispatcher")


class NotificationDispatcher:
    """Consumes check events and sends one notification email per admitted event.

    Holds no mutable state besides the set of in-flight dispatch tasks, which
    is kept only so tasks are not garbage collected early and so the host
    can wait for them at shutdown.
    """

    def __init__(
        self,
        config: NotificationConfig,
        checks: CheckRepository,
        sender: MailSender,
        renderer: Optional[TemplateRenderer] = None,
        loop: Optional[asyncio.AbstractEventLoop] = None,
        logger_instance: Optional[logging.Logger] = None,
    ):
        """Initialize the dispatcher.

        Args:
            config: Frozen notification configuration
            checks: Host lookup used to load the check an event refers to
            sender: Mail transport
            renderer: Template renderer (creates default if None)
            loop: Loop to schedule dispatches on when the handler is called
                outside a running loop
            logger_instance: Logger instance (uses module logger if None)
        """
        self.config = config
        self.checks = checks
        self.sender = sender
        self.renderer = renderer or TemplateRenderer()
        self.loop = loop
        self.logger = logger_instance or logger
        self._pending: Set[asyncio.Future] = set()

    @property
    def pending(self) -> int:
        """Number of dispatches scheduled but not finished."""
        return len(self._pending)

    def handle_event(self, event: CheckEvent) -> None:
        """Event bus subscriber. Schedules the dispatch and returns at once."""
        if not self._admit(event):
            return

        try:
            future = self._schedule(event)
        except RuntimeError as e:
            self.logger.error(
                f"Cannot schedule notification for check {event.check_id}: {e}",
                extra={"event": "notification.schedule.failure", "check_id": event.check_id},
            )
            return

        self._pending.add(future)
        future.add_done_callback(self._pending.discard)

    async def dispatch(self, event: CheckEvent) -> DispatchResult:
        """Run the full pipeline for one event and report the outcome.

        Never raises for pipeline failures; they are logged and reported as
        a ``failed`` result.
        """
        if not self._admit(event):
            return DispatchResult(check_id=event.check_id, event_kind=event.kind, status="skipped")
        return await self._run(event)

    async def drain(self) -> None:
        """Wait until every scheduled dispatch has finished."""
        while self._pending:
            in_flight = list(self._pending)
            await asyncio.gather(
                *[f if isinstance(f, asyncio.Future) else asyncio.wrap_future(f) for f in in_flight],
                return_exceptions=True,
            )
            self._pending.difference_update(f for f in in_flight if f.done())

    def _admit(self, event: CheckEvent) -> bool:
        if should_notify(event.kind, self.config.event):
            return True
        self.logger.debug(
            f"Ignoring {event.kind} event for check {event.check_id} - not enabled",
            extra={"event": "notification.skip", "reason": "event_disabled"},
        )
        return False

    def _schedule(self, event: CheckEvent):
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None

        if running is not None and (self.loop is None or self.loop is running):
            return running.create_task(self._run(event))

        if self.loop is None:
            raise RuntimeError("no running event loop and no loop configured")

        # Called from another thread: hand the coroutine to the configured loop.
        return asyncio.run_coroutine_threadsafe(self._run(event), self.loop)

    async def _run(self, event: CheckEvent) -> DispatchResult:
        with log_context(check_id=event.check_id, event_kind=event.kind):
            try:
                return await self._deliver(event)
            except Exception as e:
                self.logger.error(
                    f"Unexpected error dispatching {event.kind} event for check {event.check_id}: {e}",
                    exc_info=True,
                    extra={"event": "notification.failure", "error_type": type(e).__name__},
                )
                return self._failed(event, str(e))

    async def _deliver(self, event: CheckEvent) -> DispatchResult:
        # Step 1: Load the check
        try:
            check = await self._find_check(event)
        except CheckLookupError as e:
            self.logger.error(str(e), extra={"event": "notification.lookup.failure"})
            return self._failed(event, str(e))

        # Step 2: Render the event template
        context = build_notification_context(check, event, self.config.url)
        try:
            rendered = self.renderer.render(event.kind, context)
        except NotificationTemplateError as e:
            self.logger.error(
                f"Template rendering failed for check {check.name}: {e.message}",
                extra={"event": "notification.render.failure"},
            )
            return self._failed(event, e.message)

        # Step 3: Resolve recipients
        recipients = resolve_recipients(check, self.config)
        message = OutboundMessage(
            from_address=self.config.message.from_address,
            to=recipients,
            subject=rendered.subject,
            body=rendered.body,
        )

        # Step 4: Single best-effort send
        try:
            await self.sender.send(message)
        except DeliveryError as e:
            self.logger.error(
                f"Email plugin error: {e}",
                extra={
                    "event": "notification.send.failure",
                    "recipients": recipients,
                    "error_type": type(e).__name__,
                },
            )
            return self._failed(event, str(e), recipients)

        self.logger.info(
            f"Notified event by email: Check {check.name} {event.kind}",
            extra={"event": "notification.send.success", "recipients": recipients},
        )
        return DispatchResult(
            check_id=event.check_id,
            event_kind=event.kind,
            status="sent",
            recipients=recipients,
        )

    async def _find_check(self, event: CheckEvent) -> Check:
        try:
            check = await self.checks.find_check(event.check_id)
        except Exception as e:
            raise CheckLookupError(f"Failed to load check {event.check_id}: {e}") from e
        if check is None:
            raise CheckLookupError(f"Check {event.check_id} not found")
        return check

    @staticmethod
    def _failed(event: CheckEvent, error: str, recipients: Optional[str] = None) -> DispatchResult:
        return DispatchResult(
            check_id=event.check_id,
            event_kind=event.kind,
            status="failed",
            recipients=recipients,
            error=error,
        )

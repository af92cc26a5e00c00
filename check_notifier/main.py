"""Command line tools for operating the check notifier.

Commands:
    validate   load and validate the configuration
    preview    render the email for an event kind against a sample check
    send-test  dispatch one sample event through the configured transport
"""

import argparse
import asyncio
import os
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from check_notifier.config.exceptions import ConfigurationError
from check_notifier.config.loader import load_config
from check_notifier.config.models import AppConfig
from check_notifier.domain.models import Check, CheckEvent, EventKind
from check_notifier.host.memory import InMemoryCheckRepository
from check_notifier.logging import get_logger
from check_notifier.logging.config import configure_logging
from check_notifier.notifications.dispatcher import NotificationDispatcher
from check_notifier.notifications.models import InvalidRecipientError
from check_notifier.notifications.payloads import build_notification_context
from check_notifier.notifications.recipients import validate_recipient_override
from check_notifier.notifications.senders import build_mail_sender
from check_notifier.notifications.templates import TemplateRenderer
from check_notifier.utils.timestamps import utc_now

logger = get_logger(__name__, component="cli")

SAMPLE_ERROR = "Error 500"


def sample_check() -> Check:
    return Check(id="sample", name="Sample check", type="http", url="http://example.com/")


def sample_event(kind: str) -> CheckEvent:
    return CheckEvent(
        kind=kind,
        check_id="sample",
        timestamp=utc_now(),
        details=SAMPLE_ERROR if kind == EventKind.DOWN.value else None,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="check-notifier",
        description="Email notifications for check lifecycle events",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to configuration file (default: config.yaml or config/config.yaml)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (overrides config)",
    )

    commands = parser.add_subparsers(dest="command", required=True)
    commands.add_parser("validate", help="Validate the configuration file")

    kinds = [kind.value for kind in EventKind]
    preview = commands.add_parser("preview", help="Render an event email without sending it")
    preview.add_argument("kind", choices=kinds)

    send_test = commands.add_parser("send-test", help="Send one sample notification")
    send_test.add_argument("kind", choices=kinds)
    send_test.add_argument("--to", default=None, help="Recipients instead of message.to")

    return parser


def run_preview(app_config: AppConfig, kind: str) -> int:
    config = app_config.notification
    check, event = sample_check(), sample_event(kind)
    renderer = TemplateRenderer(search_path=config.template_dir)

    rendered = renderer.render(kind, build_notification_context(check, event, config.url))
    print(f"Subject: {rendered.subject}\n")
    print(rendered.body)
    return 0


def run_send_test(app_config: AppConfig, kind: str, to: Optional[str]) -> int:
    check = sample_check()
    if to:
        validate_recipient_override(to)
        check.set_poller_param("alert_email", to)

    # The test send ignores the event enable flags.
    config = app_config.notification.model_copy(update={"event": {kind: True}})
    dispatcher = NotificationDispatcher(
        config,
        InMemoryCheckRepository([check]),
        build_mail_sender(config),
        renderer=TemplateRenderer(search_path=config.template_dir),
    )

    result = asyncio.run(dispatcher.dispatch(sample_event(kind)))
    if result.is_success():
        print(f"Sent {kind} notification to {result.recipients}")
        return 0

    print(f"Sending failed: {result.error}", file=sys.stderr)
    return 1


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the ``check-notifier`` command.

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    load_dotenv()
    args = build_parser().parse_args(argv)

    try:
        app_config = load_config(args.config)

        configure_logging(
            level=args.log_level or app_config.logging.level,
            format_type=app_config.logging.format,
            environment=os.environ.get("ENVIRONMENT", "local"),
        )

        if args.command == "validate":
            config = app_config.notification
            print("Configuration is valid")
            print(f"  transport: {config.method.value}")
            print(f"  enabled events: {', '.join(config.enabled_events()) or 'none'}")
            print(f"  default recipients: {config.message.to}")
            return 0

        if args.command == "preview":
            return run_preview(app_config, args.kind)

        return run_send_test(app_config, args.kind, args.to)

    except ConfigurationError as e:
        print(f"Configuration Error: {e}", file=sys.stderr)
        return 1
    except InvalidRecipientError as e:
        print(f"Invalid recipients: {e}", file=sys.stderr)
        return 2
    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())

"""Mail sender transports.

Every transport exposes ``async send(message) -> SendReceipt``. The
underlying libraries are blocking (smtplib, a sendmail subprocess), so the
actual hand-off runs in a worker thread and the event loop stays free while
a slow mail server answers.
"""

import asyncio
import logging
import smtplib
import ssl
import subprocess
from email.message import EmailMessage
from email.utils import formatdate, getaddresses, make_msgid
from typing import Any, Callable, Dict, List, Mapping, Optional, Protocol, Tuple

from check_notifier.config.exceptions import ConfigurationError
from check_notifier.config.models import NotificationConfig, TransportMethod
from check_notifier.domain.models import OutboundMessage

from .models import DeliveryError, SendReceipt

logger = logging.getLogger(__name__)

# Shorthands accepted as ``transport.service``.
WELL_KNOWN_SERVICES: Dict[str, Tuple[str, int]] = {
    "gmail": ("smtp.gmail.com", 465),
    "outlook": ("smtp-mail.outlook.com", 587),
    "hotmail": ("smtp-mail.outlook.com", 587),
    "yahoo": ("smtp.mail.yahoo.com", 465),
}


class MailSender(Protocol):
    """Opaque delivery capability used by the dispatcher."""

    async def send(self, message: OutboundMessage) -> SendReceipt: ...


def build_email_message(message: OutboundMessage) -> EmailMessage:
    """Turn an outbound notification into a plain-text MIME message."""
    email_message = EmailMessage()
    email_message["Subject"] = message.subject
    email_message["From"] = message.from_address
    email_message["To"] = message.to
    email_message["Date"] = formatdate(localtime=False)
    email_message["Message-ID"] = make_msgid()
    email_message.set_content(message.body)
    return email_message


def _recipient_list(to: str) -> List[str]:
    return [address for _, address in getaddresses([to]) if address]


class SMTPMailSender:
    """Delivers messages over SMTP.

    Recognised transport options:
        host, port: server address (default ``localhost:587``)
        service: shorthand for host and port (Gmail, Outlook, Yahoo)
        secure: implicit TLS; defaults to True on port 465
        use_tls: STARTTLS upgrade on plain connections (default True)
        user, pass (or auth.user, auth.pass): login credentials
        timeout: socket timeout in seconds (default 30)
    """

    def __init__(
        self,
        options: Optional[Mapping[str, Any]] = None,
        smtp_factory: Optional[Callable] = None,
        smtp_ssl_factory: Optional[Callable] = None,
        transport_name: str = "SMTP",
    ):
        options = dict(options or {})
        auth = options.get("auth") or {}

        service = str(options.get("service") or "").lower()
        default_host, default_port = WELL_KNOWN_SERVICES.get(service, ("localhost", 587))
        if service and service not in WELL_KNOWN_SERVICES:
            raise ConfigurationError(
                f"Unknown mail service: {options['service']}",
                suggestions=[
                    f"Use one of: {', '.join(sorted(WELL_KNOWN_SERVICES))}",
                    "Or set transport.host and transport.port explicitly",
                ],
            )

        self.host: str = options.get("host") or default_host
        self.port: int = int(options.get("port") or default_port)
        self.secure: bool = bool(options.get("secure", self.port == 465))
        self.use_tls: bool = bool(options.get("use_tls", True))
        self.user: Optional[str] = options.get("user") or auth.get("user")
        self.password: Optional[str] = options.get("pass") or auth.get("pass")
        self.timeout: float = float(options.get("timeout", 30))
        self.transport_name = transport_name

        self.smtp_factory = smtp_factory or smtplib.SMTP
        self.smtp_ssl_factory = smtp_ssl_factory or smtplib.SMTP_SSL

    async def send(self, message: OutboundMessage) -> SendReceipt:
        email_message = build_email_message(message)
        response = await asyncio.to_thread(self._deliver, email_message)
        return SendReceipt(
            transport=self.transport_name,
            recipients=_recipient_list(message.to),
            response=response,
        )

    def _deliver(self, email_message: EmailMessage) -> Optional[str]:
        """Blocking delivery; runs in a worker thread.

        Raises:
            DeliveryError: If connecting, authenticating or sending fails
        """
        smtp = None
        try:
            if self.secure:
                logger.debug(f"Connecting to {self.host}:{self.port} with implicit TLS")
                smtp = self.smtp_ssl_factory(
                    self.host, self.port, timeout=self.timeout, context=ssl.create_default_context()
                )
            else:
                logger.debug(f"Connecting to {self.host}:{self.port}")
                smtp = self.smtp_factory(self.host, self.port, timeout=self.timeout)
                if self.use_tls:
                    smtp.starttls(context=ssl.create_default_context())

            if self.user and self.password:
                smtp.login(self.user, self.password)

            refused = smtp.send_message(email_message)
            if refused:
                logger.warning(f"Some recipients were refused: {', '.join(refused)}")
            return f"{len(refused or {})} recipient(s) refused"

        except smtplib.SMTPException as e:
            raise DeliveryError(f"SMTP error during message delivery: {e}") from e
        except OSError as e:
            raise DeliveryError(f"Network error during SMTP connection: {e}") from e
        finally:
            if smtp is not None:
                try:
                    smtp.quit()
                except (smtplib.SMTPException, OSError) as e:
                    logger.warning(f"Error closing SMTP connection: {e}")


class SendmailMailSender:
    """Delivers messages through the local MTA's ``sendmail`` binary.

    Recognised transport options:
        path: sendmail binary (default ``/usr/sbin/sendmail``)
        args: argument list (default ``["-t", "-i"]``)
        timeout: seconds to wait for the process (default 30)
    """

    def __init__(
        self,
        options: Optional[Mapping[str, Any]] = None,
        runner: Optional[Callable[..., subprocess.CompletedProcess]] = None,
    ):
        options = dict(options or {})
        self.path: str = options.get("path") or "/usr/sbin/sendmail"
        self.args: List[str] = list(options.get("args") or ["-t", "-i"])
        self.timeout: float = float(options.get("timeout", 30))
        self.runner = runner or subprocess.run

    async def send(self, message: OutboundMessage) -> SendReceipt:
        email_message = build_email_message(message)
        await asyncio.to_thread(self._deliver, email_message)
        return SendReceipt(transport="Sendmail", recipients=_recipient_list(message.to))

    def _deliver(self, email_message: EmailMessage) -> None:
        try:
            result = self.runner(
                [self.path, *self.args],
                input=email_message.as_bytes(),
                capture_output=True,
                timeout=self.timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as e:
            raise DeliveryError(f"sendmail timed out after {self.timeout}s") from e
        except OSError as e:
            raise DeliveryError(f"Could not run {self.path}: {e}") from e

        if result.returncode != 0:
            stderr = (result.stderr or b"").decode("utf-8", errors="replace").strip()
            raise DeliveryError(f"sendmail exited with status {result.returncode}: {stderr}")


def build_mail_sender(config: NotificationConfig) -> MailSender:
    """Instantiate the transport selected by ``config.method``.

    SES is reached through its SMTP interface
    (``email-smtp.<region>.amazonaws.com``) with SES SMTP credentials.

    Raises:
        ConfigurationError: If the method is unsupported or its options are invalid
    """
    method = config.method
    options = dict(config.transport)

    logger.debug("Creating mail sender", extra={"transport": str(getattr(method, "value", method))})

    if method == TransportMethod.SMTP:
        return SMTPMailSender(options)

    if method == TransportMethod.SES:
        region = options.pop("region", None) or "us-east-1"
        options.setdefault("host", f"email-smtp.{region}.amazonaws.com")
        options.setdefault("port", 587)
        return SMTPMailSender(options, transport_name="SES")

    if method == TransportMethod.SENDMAIL:
        return SendmailMailSender(options)

    raise ConfigurationError(
        f"Unsupported mail transport: {method}",
        suggestions=[f"Use one of: {', '.join(m.value for m in TransportMethod)}"],
    )

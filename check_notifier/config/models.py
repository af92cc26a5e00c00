"""Configuration schema models using Pydantic.

All models are frozen: configuration is built once at startup and shared,
read-only, by every component for the lifetime of the process.
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from check_notifier.utils.addresses import parse_recipients, parse_sender


class TransportMethod(str, Enum):
    """Supported mail transports."""

    SMTP = "SMTP"
    SES = "SES"
    SENDMAIL = "Sendmail"


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Log output formats."""

    JSON = "json"
    KEY_VALUE = "key-value"


class MessageEnvelope(BaseModel):
    """Default envelope applied to every outgoing notification."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    from_address: str = Field(..., alias="from", description="From header, display name allowed")
    to: str = Field(..., description="Comma-separated default recipients")

    @field_validator("from_address")
    @classmethod
    def validate_sender(cls, v: str) -> str:
        return parse_sender(v)

    @field_validator("to")
    @classmethod
    def validate_recipients(cls, v: str) -> str:
        """Validate every default recipient but keep the configured string."""
        parse_recipients(v)
        return v.strip()


class NotificationConfig(BaseModel):
    """The ``email`` section of the host configuration plus the shared ``url``."""

    model_config = ConfigDict(frozen=True)

    method: TransportMethod = Field(TransportMethod.SMTP, description="Mail transport")
    transport: Dict[str, Any] = Field(
        default_factory=dict,
        description="Transport-specific options, passed through to the mail sender",
    )
    event: Dict[str, bool] = Field(
        default_factory=dict,
        description="Per event kind enable flags; missing kinds are disabled",
    )
    message: MessageEnvelope
    url: Optional[str] = Field(None, description="Base URL used for links in emails")
    template_dir: Optional[str] = Field(
        None, description="Directory searched for templates before the bundled ones"
    )

    @field_validator("method", mode="before")
    @classmethod
    def normalize_method(cls, v: Any) -> Any:
        """Accept transport names case-insensitively (``smtp``, ``sendmail``)."""
        if isinstance(v, str):
            for method in TransportMethod:
                if method.value.lower() == v.strip().lower():
                    return method
        return v

    @field_validator("url")
    @classmethod
    def strip_trailing_slash(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        stripped = v.strip().rstrip("/")
        return stripped or None

    def enabled_events(self) -> List[str]:
        return [kind for kind, enabled in self.event.items() if enabled]


class LoggingConfig(BaseModel):
    """Logging configuration."""

    model_config = ConfigDict(frozen=True, use_enum_values=True)

    level: LogLevel = Field(LogLevel.INFO, description="Log level")
    format: LogFormat = Field(LogFormat.KEY_VALUE, description="Log output format (json or key-value)")


class AppConfig(BaseModel):
    """Root configuration object for the notifier."""

    model_config = ConfigDict(frozen=True)

    notification: NotificationConfig
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

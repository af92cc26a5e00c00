"""Configuration management for the check notifier."""

from .environment import apply_environment_overrides
from .exceptions import ConfigurationError
from .loader import config_from_dict, load_config
from .models import (
    AppConfig,
    LogFormat,
    LoggingConfig,
    LogLevel,
    MessageEnvelope,
    NotificationConfig,
    TransportMethod,
)

__all__ = [
    # Loader functions
    "load_config",
    "config_from_dict",
    "apply_environment_overrides",
    # Configuration models
    "AppConfig",
    "NotificationConfig",
    "MessageEnvelope",
    "LoggingConfig",
    # Enums
    "TransportMethod",
    "LogLevel",
    "LogFormat",
    # Exceptions
    "ConfigurationError",
]

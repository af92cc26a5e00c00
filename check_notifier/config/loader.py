"""Configuration loader for the check notifier."""

from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml
from pydantic import ValidationError

from .environment import apply_environment_overrides
from .exceptions import ConfigurationError
from .models import AppConfig
from .validators import check_for_warnings, emit_warnings

DEFAULT_LOCATIONS = (
    Path("config.yaml"),
    Path("config") / "config.yaml",
)


def load_config(
    config_path: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> AppConfig:
    """Load and validate configuration from a YAML file.

    Lookup order:
    1. ``config_path`` if given
    2. ``config.yaml`` in the current directory
    3. ``config/config.yaml``

    Raises:
        ConfigurationError: If the file is missing, unreadable or invalid
    """
    config_file = _find_config_file(config_path)

    try:
        with open(config_file, "r", encoding="utf-8") as f:
            config_dict = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(
            f"Failed to parse YAML configuration: {e}",
            suggestions=[
                "Check YAML syntax in your config file",
                "Ensure proper indentation (use spaces, not tabs)",
            ],
        ) from e
    except OSError as e:
        raise ConfigurationError(
            f"Failed to read configuration file: {e}",
            suggestions=[f"Ensure {config_file} is readable"],
        ) from e

    if not config_dict:
        raise ConfigurationError(
            "Configuration file is empty",
            suggestions=["Copy config.example.yaml to config.yaml"],
        )

    return config_from_dict(config_dict, environ=environ)


def config_from_dict(
    config_dict: Dict[str, Any],
    environ: Optional[Mapping[str, str]] = None,
) -> AppConfig:
    """Build the frozen configuration from a host configuration mapping.

    Only the ``email``, ``url`` and ``logging`` keys are read; the rest of
    the host configuration is ignored.

    Raises:
        ConfigurationError: If the ``email`` section is missing or invalid
    """
    if not isinstance(config_dict, dict):
        raise ConfigurationError("Configuration must be a mapping at the top level")

    email = config_dict.get("email")
    if not isinstance(email, dict):
        raise ConfigurationError(
            "Missing 'email' section in configuration",
            suggestions=["Add an 'email' section with method, transport, event and message keys"],
        )

    warnings = check_for_warnings(config_dict)
    if warnings:
        emit_warnings(warnings)

    notification = {
        **email,
        "transport": apply_environment_overrides(email.get("transport") or {}, environ),
        "url": config_dict.get("url"),
    }
    raw = {"notification": notification}
    if config_dict.get("logging"):
        raw["logging"] = config_dict["logging"]

    try:
        return AppConfig.model_validate(raw)
    except ValidationError as e:
        raise ConfigurationError(
            "Configuration validation failed",
            errors=[_describe_error(error) for error in e.errors()],
            suggestions=[
                "Review config.example.yaml for correct format",
                "Check that email.message.from and email.message.to are valid addresses",
            ],
        ) from e


def _describe_error(error: Dict[str, Any]) -> str:
    # Report paths the way they appear in the YAML file.
    loc = ["email" if part == "notification" else str(part) for part in error["loc"]]
    if loc[:2] == ["email", "url"]:
        loc = ["url"]
    field_path = " -> ".join(loc)

    if error["type"] == "missing":
        return f"Missing required field: {field_path}"
    if error["type"] == "enum":
        return f"Invalid value for '{field_path}': {error['msg']}"
    return f"{field_path}: {error['msg']}"


def _find_config_file(config_path: Optional[Path] = None) -> Path:
    if config_path:
        if not config_path.exists():
            raise ConfigurationError(
                f"Specified configuration file not found: {config_path}",
                suggestions=[f"Ensure {config_path} exists"],
            )
        return config_path

    for candidate in DEFAULT_LOCATIONS:
        if candidate.exists():
            return candidate

    raise ConfigurationError(
        "Configuration file not found",
        errors=[f"Tried: {candidate}" for candidate in DEFAULT_LOCATIONS],
        suggestions=[
            "Copy config.example.yaml to config.yaml",
            "Use --config to specify a custom location",
        ],
    )

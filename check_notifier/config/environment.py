"""Environment variable overrides for transport secrets.

Credentials rarely belong in the YAML file, so the following variables,
when set, replace the matching ``email.transport`` options:

- ``SMTP_HOST`` -> ``host``
- ``SMTP_PORT`` -> ``port`` (1-65535)
- ``SMTP_USER`` -> ``user``
- ``SMTP_PASS`` -> ``pass``
- ``SES_REGION`` -> ``region``
"""

import os
from typing import Any, Dict, Mapping, Optional

from .exceptions import ConfigurationError

_ENV_TO_OPTION = {
    "SMTP_HOST": "host",
    "SMTP_PORT": "port",
    "SMTP_USER": "user",
    "SMTP_PASS": "pass",
    "SES_REGION": "region",
}


def apply_environment_overrides(
    transport: Mapping[str, Any],
    environ: Optional[Mapping[str, str]] = None,
) -> Dict[str, Any]:
    """Return a copy of ``transport`` with environment values merged in.

    Raises:
        ConfigurationError: If an override is malformed, or user and
            password are not both present after merging
    """
    environ = os.environ if environ is None else environ
    merged = dict(transport)
    errors = []

    for env_name, option in _ENV_TO_OPTION.items():
        value = environ.get(env_name)
        if value:
            merged[option] = value

    if "port" in merged:
        try:
            port = int(merged["port"])
        except (TypeError, ValueError):
            errors.append(f"Invalid SMTP port: '{merged['port']}'. Must be a valid integer.")
        else:
            if not 1 <= port <= 65535:
                errors.append(f"Invalid SMTP port: {port}. Must be between 1 and 65535.")
            merged["port"] = port

    auth = merged.get("auth") or {}
    user = merged.get("user") or auth.get("user")
    password = merged.get("pass") or auth.get("pass")
    if user and not password:
        errors.append("SMTP user is set but password is not. Both must be set for authentication.")
    elif password and not user:
        errors.append("SMTP password is set but user is not. Both must be set for authentication.")

    if errors:
        raise ConfigurationError(
            "Transport configuration is invalid",
            errors=errors,
            suggestions=[
                "Check email.transport in your config file",
                "Check SMTP_* and SES_REGION environment variables",
            ],
        )

    return merged

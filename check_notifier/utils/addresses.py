"""Email address parsing and validation.

Two rulesets live here on purpose:

* ``is_valid_address`` is the grammar used for per-check overrides typed into
  the dashboard. It is a best-effort RFC 5322 approximation and its exact
  behaviour is relied upon, so edge cases are kept as they are:

  - local part: dot-separated atoms without ``<>()[]\\.,;:@"`` or whitespace,
    or any non-empty double-quoted string
  - domain: a bracketed IPv4 literal (``[10.0.0.1]``), or dot-separated labels
    of ``[A-Za-z0-9-]`` ending in an alphabetic TLD of two or more letters

* ``parse_recipients`` validates addresses coming from the configuration file
  with email-validator, which also understands ``Name <addr>`` forms. Those
  addresses may point at a local MTA (``root@localhost``, ``ops@host.local``),
  so only syntax is checked, never global deliverability.
"""

import re
from email.utils import getaddresses, parseaddr
from typing import List

from email_validator import EmailNotValidError, validate_email

ADDRESS_PATTERN = re.compile(
    r'(([^<>()\[\]\\.,;:\s@"]+(\.[^<>()\[\]\\.,;:\s@"]+)*)|(".+"))'
    r"@"
    r"((\[[0-9]{1,3}\.[0-9]{1,3}\.[0-9]{1,3}\.[0-9]{1,3}\])|(([a-zA-Z\-0-9]+\.)+[a-zA-Z]{2,}))"
)

# Host-local mail domains a local MTA delivers to. email-validator rejects them
# as special-use, so their labels are checked against a stand-in domain.
LOCAL_MAIL_DOMAINS = ("localhost", "local", "test")

_STAND_IN_DOMAIN = "example.com"


def is_valid_address(address: str) -> bool:
    """Return True if ``address`` matches the override grammar exactly.

    Example:
        >>> is_valid_address("a@b.com")
        True
        >>> is_valid_address("a@b")
        False
    """
    return ADDRESS_PATTERN.fullmatch(address) is not None


def split_recipients(recipient_string: str) -> List[str]:
    """Split a comma-separated list, trimming whitespace around each entry.

    Empty entries are kept so callers can reject ``"a@b.com,"``.
    """
    return [part.strip() for part in recipient_string.split(",")]


def parse_recipients(recipient_string: str) -> List[str]:
    """Parse and validate a comma-separated list of configured addresses.

    Returns:
        Normalized addresses, display names dropped

    Raises:
        ValueError: If an entry is invalid or the list is empty
    """
    recipients = []

    for name, address in getaddresses([recipient_string]):
        if not address:
            continue
        try:
            recipients.append(validate_configured_address(address))
        except EmailNotValidError as e:
            raise ValueError(f"Invalid email address '{address}': {e}") from e

    if not recipients:
        raise ValueError("No valid email addresses found")

    return recipients


def parse_sender(sender: str) -> str:
    """Validate a ``From`` value, with or without a display name.

    Returns the original string so the display name reaches the message.

    Raises:
        ValueError: If the address part is missing or invalid
    """
    _, address = parseaddr(sender)
    if not address:
        raise ValueError(f"Missing sender address in '{sender}'")
    try:
        validate_configured_address(address)
    except EmailNotValidError as e:
        raise ValueError(f"Invalid sender address '{address}': {e}") from e
    return sender.strip()


def validate_configured_address(address: str) -> str:
    """Check the syntax of a configured address and return its normalized form.

    Raises:
        EmailNotValidError: If the address is malformed
    """
    local_part, _, domain = address.rpartition("@")
    host = domain.lower()

    for suffix in LOCAL_MAIL_DOMAINS:
        if host == suffix or host.endswith("." + suffix):
            prefix = host[: -len(suffix)]
            validated = validate_email(
                f"{local_part}@{prefix}{_STAND_IN_DOMAIN}",
                check_deliverability=False,
                globally_deliverable=False,
            )
            return f"{validated.local_part}@{host}"

    validated = validate_email(address, check_deliverability=False, globally_deliverable=False)
    return validated.normalized

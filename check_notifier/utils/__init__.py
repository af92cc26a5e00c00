"""Utility functions for address handling and time formatting."""

from .addresses import (
    ADDRESS_PATTERN,
    is_valid_address,
    parse_recipients,
    parse_sender,
    split_recipients,
)
from .timestamps import ensure_utc, format_human, format_timestamp, utc_now

__all__ = [
    # Addresses
    "ADDRESS_PATTERN",
    "is_valid_address",
    "split_recipients",
    "parse_recipients",
    "parse_sender",
    # Timestamps
    "utc_now",
    "ensure_utc",
    "format_timestamp",
    "format_human",
]

"""Test helper utilities for check notifier tests."""

from .fakes import (
    FailingCheckRepository,
    FailingMailSender,
    GatedMailSender,
    RecordingMailSender,
)

__all__ = [
    "RecordingMailSender",
    "FailingMailSender",
    "GatedMailSender",
    "FailingCheckRepository",
]

"""Logging helpers shared by every notifier component."""

import logging
from typing import Optional


class ComponentLoggerAdapter(logging.LoggerAdapter):
    """LoggerAdapter that stamps a component name on every record.

    Fields passed through ``extra`` at the call site win over the adapter's
    own fields.
    """

    def process(self, msg, kwargs):
        kwargs["extra"] = {**self.extra, **kwargs.get("extra", {})}
        return msg, kwargs


def get_logger(name: str, component: Optional[str] = None):
    """Return a module logger, wrapped with a component tag when given.

    Example:
        >>> logger = get_logger(__name__, component="dispatcher")
        >>> logger.info("Dispatch started", extra={"event": "notification.dispatch.started"})
    """
    logger = logging.getLogger(name)

    if component:
        return ComponentLoggerAdapter(logger, {"component": component})

    return logger

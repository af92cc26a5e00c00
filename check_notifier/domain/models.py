"""Domain models for checks, check events and rendered messages.

- Check: a monitored target, owned and persisted by the host
- CheckEvent: an immutable record of a check state transition
- RenderedMessage: subject and body produced for one dispatch
- OutboundMessage: the envelope handed to a mail sender
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from check_notifier.utils.timestamps import ensure_utc

ALERT_EMAIL_PARAM = "alert_email"

EDITABLE_CHECK_TYPES = frozenset({"http", "https"})


class EventKind(str, Enum):
    """Event kinds this package ships templates for."""

    UP = "up"
    DOWN = "down"
    PAUSED = "paused"
    RESTARTED = "restarted"


class Check(BaseModel):
    """A monitored target as seen by the notifier.

    The host keeps arbitrary poller parameters per check. The per-check
    recipient override is split out of that map into ``alert_email``; every
    other parameter stays in ``poller_params`` untouched.
    """

    model_config = ConfigDict(populate_by_name=True, validate_assignment=True)

    id: str = Field(..., description="Host identifier of the check")
    name: str = Field(..., description="Display name")
    type: str = Field("http", description="Protocol family (http, https, ...)")
    url: str = Field("", description="Target URL")
    poller_params: Dict[str, str] = Field(default_factory=dict, alias="pollerParams")
    alert_email: Optional[str] = Field(None, description="Recipient override, already validated")

    @model_validator(mode="before")
    @classmethod
    def lift_alert_email(cls, data: Any) -> Any:
        """Move ``alert_email`` out of the poller parameter map."""
        if not isinstance(data, dict):
            return data
        data = dict(data)
        key = "pollerParams" if "pollerParams" in data else "poller_params"
        params = dict(data.get(key) or {})
        override = params.pop(ALERT_EMAIL_PARAM, None)
        if override and not data.get(ALERT_EMAIL_PARAM):
            data[ALERT_EMAIL_PARAM] = override
        data[key] = params
        return data

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> Any:
        if isinstance(v, int):
            return str(v)
        return v

    @field_validator("type")
    @classmethod
    def normalize_type(cls, v: str) -> str:
        return v.strip().lower()

    def set_poller_param(self, key: str, value: str) -> None:
        """Host-provided setter for a single poller parameter."""
        if key == ALERT_EMAIL_PARAM:
            self.alert_email = value
        else:
            self.poller_params = {**self.poller_params, key: value}


class CheckEvent(BaseModel):
    """Immutable record of something that happened to a check.

    ``kind`` keeps the raw lowercased string so kinds defined only by the
    host survive.
    """

    model_config = ConfigDict(frozen=True)

    kind: str = Field(..., min_length=1, description="Event kind, e.g. up or down")
    check_id: str = Field(..., description="Identifier of the check concerned")
    timestamp: datetime = Field(..., description="When the transition happened (UTC)")
    details: Optional[str] = Field(None, description="Error payload for failure events")

    @field_validator("kind", mode="before")
    @classmethod
    def normalize_kind(cls, v: Any) -> Any:
        if isinstance(v, EventKind):
            return v.value
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("check_id", mode="before")
    @classmethod
    def coerce_check_id(cls, v: Any) -> Any:
        if isinstance(v, int):
            return str(v)
        return v

    @field_validator("timestamp")
    @classmethod
    def utc_timestamp(cls, v: datetime) -> datetime:
        return ensure_utc(v)


class RenderedMessage(BaseModel):
    """Subject and body rendered for one dispatch."""

    model_config = ConfigDict(frozen=True)

    subject: str
    body: str


class OutboundMessage(BaseModel):
    """Everything a mail sender needs to deliver one notification."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    from_address: str = Field(..., alias="from")
    to: str
    subject: str
    body: str

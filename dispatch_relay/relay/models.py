"""Trigger payload and dispatch envelope models."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

EVENT_TYPE = "product-updated"
DEFAULT_ACTION = "product-updated"
DEFAULT_SITE = "https://www.mydiy.ie"

_PAYLOAD_FIELDS = ("action", "urls", "site", "changes")


def utc_timestamp(now: datetime | None = None) -> str:
    """ISO-8601 UTC timestamp with millisecond precision, e.g. ``2026-01-02T03:04:05.678Z``."""
    moment = (now or datetime.now(UTC)).astimezone(UTC)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class TriggerPayload(BaseModel):
    """Body sent by the change-detection service.

    Every field is optional. Missing, ``null`` or empty values fall back to
    the default instead of being rejected; any other value is forwarded
    as sent, whatever its type. Unknown keys are dropped. A JSON body that
    is not an object carries no fields, so it gets the defaults; only a
    ``null`` body is refused.
    """

    model_config = ConfigDict(extra="ignore")

    action: Any = DEFAULT_ACTION
    urls: Any = Field(default_factory=list)
    site: Any = DEFAULT_SITE
    changes: Any = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _drop_empty_fields(cls, data: Any) -> Any:
        if data is None:
            msg = "request body is null"
            raise ValueError(msg)
        if not isinstance(data, dict):
            return {}
        return {k: v for k, v in data.items() if k not in _PAYLOAD_FIELDS or _is_set(v)}


def _is_set(value: Any) -> bool:
    """Truthiness of the sender's JSON: ``null``, ``""``, ``0`` and ``false`` count as unset."""
    if isinstance(value, list | dict):
        return True
    return bool(value)


class ClientPayload(BaseModel):
    """Data attached to the dispatch event and handed to the triggered workflow."""

    action: Any
    urls: Any
    site: Any
    changes: Any
    timestamp: str


class DispatchEnvelope(BaseModel):
    """Request body for ``POST /repos/{owner}/{repo}/dispatches``."""

    event_type: str = EVENT_TYPE
    client_payload: ClientPayload


def build_envelope(payload: TriggerPayload, *, now: datetime | None = None) -> DispatchEnvelope:
    """Wrap *payload* in a dispatch envelope stamped with the current UTC time.

    ``event_type`` is always ``product-updated``; the sender's ``action`` only
    travels inside ``client_payload``.
    """
    return DispatchEnvelope(
        client_payload=ClientPayload(
            action=payload.action,
            urls=payload.urls,
            site=payload.site,
            changes=payload.changes,
            timestamp=utc_timestamp(now),
        ),
    )

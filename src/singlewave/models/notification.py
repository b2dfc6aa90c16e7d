"""Inbound notification payload model."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class NotificationEventRef(BaseModel):
    """Hash triple the backend embeds in every notification it sends.

    The payload shape is ``{"data": {"notificationHash": ..., "openHash":
    ..., "controlHash": ...}}``.  The triple only lives for the duration of
    one tracking call.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    notification_hash: str = Field(alias="notificationHash")
    open_hash: str = Field(alias="openHash")
    control_hash: str = Field(alias="controlHash")

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any] | None) -> NotificationEventRef | None:
        """Extract the triple from a notification payload.

        Returns ``None`` when the nested ``data`` mapping is missing or
        any of the three hashes is absent or not a string.
        """
        if not isinstance(payload, Mapping):
            return None
        data = payload.get("data")
        if not isinstance(data, Mapping):
            return None
        values: dict[str, str] = {}
        for key in ("notificationHash", "openHash", "controlHash"):
            value = data.get(key)
            if not isinstance(value, str):
                return None
            values[key] = value
        return cls.model_validate(values)

"""Outgoing request models for the subscriber endpoints."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from singlewave._constants import PLATFORM


class RegistrationRequest(BaseModel):
    """Snapshot of the session sent to ``/v1/subscribers/register``."""

    model_config = ConfigDict(frozen=True)

    language: str
    project_hash: str
    platform: str = PLATFORM
    token: str = ""
    custom_data_json: str = "{}"

    def to_params(self) -> list[tuple[str, str]]:
        """Wire parameters, in the order the backend expects them."""
        return [
            ("language", self.language),
            ("hash", self.project_hash),
            ("platform", self.platform),
            ("token", self.token),
            ("data", self.custom_data_json),
        ]


class OpenTrackingRequest(BaseModel):
    """A notification open reported to ``/v1/subscribers/open``."""

    model_config = ConfigDict(frozen=True)

    platform: str = PLATFORM
    notification_hash: str
    open_hash: str
    control_hash: str

    def to_params(self) -> list[tuple[str, str]]:
        return [
            ("platform", self.platform),
            ("notificationHash", self.notification_hash),
            ("openHash", self.open_hash),
            ("controlHash", self.control_hash),
        ]

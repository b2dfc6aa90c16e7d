"""Per-client session state."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Session(BaseModel):
    """Registration state of this device.

    Parameters
    ----------
    project_id : str
        Tenant identifier issued by the backend, sent as ``hash``.
        Immutable once the session exists.
    device_token : str
        Lowercase hex push token, ``""`` until the platform delivers one.
    custom_data : dict
        Host-supplied string attributes attached to the subscriber.
    debug : bool
        Whether routine SDK messages are logged.
    """

    model_config = ConfigDict(
        extra="forbid",
        validate_assignment=True,
    )

    project_id: str = Field(frozen=True)
    device_token: str = ""
    custom_data: dict[str, str] = Field(default_factory=dict)
    debug: bool = False

    @field_validator("project_id")
    @classmethod
    def _require_project_id(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("project_id must be non-empty")
        return value

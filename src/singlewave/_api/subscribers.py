"""Subscriber endpoints.

Endpoints:
  - /v1/subscribers/register  (create or update this device's subscriber)
  - /v1/subscribers/open      (report a notification open)
"""

from __future__ import annotations

from typing import Any

from singlewave._api._common import encode_custom_data, post_form_json
from singlewave._constants import OPEN_ENDPOINT, REGISTER_ENDPOINT
from singlewave._transport import Transport
from singlewave.config import SingleWaveConfig
from singlewave.models.notification import NotificationEventRef
from singlewave.models.requests import OpenTrackingRequest, RegistrationRequest
from singlewave.models.session import Session


def build_registration_request(config: SingleWaveConfig, session: Session) -> RegistrationRequest:
    """Snapshot *session* into a registration request."""
    return RegistrationRequest(
        language=config.language,
        project_hash=session.project_id,
        platform=config.platform,
        token=session.device_token,
        custom_data_json=encode_custom_data(
            session.custom_data,
            legacy=config.legacy_custom_data_encoding,
        ),
    )


def build_open_request(config: SingleWaveConfig, ref: NotificationEventRef) -> OpenTrackingRequest:
    return OpenTrackingRequest(
        platform=config.platform,
        notification_hash=ref.notification_hash,
        open_hash=ref.open_hash,
        control_hash=ref.control_hash,
    )


async def register(transport: Transport, request: RegistrationRequest) -> dict[str, Any]:
    """Register (or refresh) the subscriber for this device."""
    return await post_form_json(
        endpoint=REGISTER_ENDPOINT,
        transport=transport,
        params=request.to_params(),
    )


async def track_open(transport: Transport, request: OpenTrackingRequest) -> dict[str, Any]:
    """Report that a notification was opened.

    The backend dedupes on the hash triple; the client sends every open.
    """
    return await post_form_json(
        endpoint=OPEN_ENDPOINT,
        transport=transport,
        params=request.to_params(),
    )


async def post_params(
    transport: Transport,
    endpoint: str,
    params: list[tuple[str, str]],
) -> dict[str, Any]:
    """Replay previously built parameters (used by the outbox)."""
    return await post_form_json(endpoint=endpoint, transport=transport, params=list(params))

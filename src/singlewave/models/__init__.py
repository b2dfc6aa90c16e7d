"""Data models for singlewave."""

from singlewave.models.device_token import device_token_hex
from singlewave.models.notification import NotificationEventRef
from singlewave.models.permission import (
    DEFAULT_AUTHORIZATION_OPTIONS,
    FOREGROUND_PRESENTATION,
    AuthorizationOption,
    AuthorizationStatus,
    PresentationOption,
)
from singlewave.models.requests import OpenTrackingRequest, RegistrationRequest
from singlewave.models.session import Session

__all__ = [
    "DEFAULT_AUTHORIZATION_OPTIONS",
    "FOREGROUND_PRESENTATION",
    "AuthorizationOption",
    "AuthorizationStatus",
    "NotificationEventRef",
    "OpenTrackingRequest",
    "PresentationOption",
    "RegistrationRequest",
    "Session",
    "device_token_hex",
]

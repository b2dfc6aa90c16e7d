"""singlewave - Async Python client for SingleWave push registration and open tracking."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from singlewave._version import __version__
from singlewave.client import SingleWaveClient
from singlewave.config import SingleWaveConfig
from singlewave.exceptions import (
    SingleWaveConfigError,
    SingleWaveDeviceTokenError,
    SingleWaveError,
    SingleWaveNotInitializedError,
    SingleWaveStorageError,
    SingleWaveTransportError,
)
from singlewave.models import (
    AuthorizationOption,
    AuthorizationStatus,
    NotificationEventRef,
    PresentationOption,
    RegistrationRequest,
    Session,
)
from singlewave.providers import (
    NotificationEventSource,
    NotificationHandler,
    NotificationPermissionProvider,
    PushTokenProvider,
)
from singlewave.storage import JsonFileStore, KeyValueStore, MemoryStore


async def initialize(
    project_id: str,
    launch_options: Mapping[str, Any] | None = None,
    debug: bool = False,
    **client_kwargs: Any,
) -> SingleWaveClient:
    """Start a :class:`SingleWaveClient` and initialize it.

    The returned client is the handle for every later call; close it with
    :meth:`SingleWaveClient.aclose` on shutdown.
    """
    client = SingleWaveClient(**client_kwargs)
    await client.initialize(project_id, launch_options, debug=debug)
    return client


__all__ = [
    "__version__",
    "AuthorizationOption",
    "AuthorizationStatus",
    "JsonFileStore",
    "KeyValueStore",
    "MemoryStore",
    "NotificationEventRef",
    "NotificationEventSource",
    "NotificationHandler",
    "NotificationPermissionProvider",
    "PresentationOption",
    "PushTokenProvider",
    "RegistrationRequest",
    "Session",
    "SingleWaveClient",
    "SingleWaveConfig",
    "SingleWaveConfigError",
    "SingleWaveDeviceTokenError",
    "SingleWaveError",
    "SingleWaveNotInitializedError",
    "SingleWaveStorageError",
    "SingleWaveTransportError",
    "initialize",
]

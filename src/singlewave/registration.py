"""Registration state: device token and custom data.

Every change is persisted and then pushed to the backend.  Mutations go
through a single ``asyncio.Lock`` so a token update and a custom data
update never interleave; the request snapshot is taken inside the lock,
the network call runs outside it.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Mapping
from typing import Any

from singlewave._api.subscribers import build_registration_request
from singlewave._background import BackgroundTasks
from singlewave._redact import redact_for_log, redact_token
from singlewave.backend import BackendClient
from singlewave.config import SingleWaveConfig
from singlewave.exceptions import SingleWaveStorageError
from singlewave.models.requests import RegistrationRequest
from singlewave.models.session import Session
from singlewave.storage import KeyValueStore, save_custom_data, save_device_token

_logger = logging.getLogger(__name__)


class RegistrationManager:
    """Owns the :class:`Session` of one initialization."""

    def __init__(
        self,
        config: SingleWaveConfig,
        session: Session,
        store: KeyValueStore,
        backend: BackendClient,
        tasks: BackgroundTasks,
    ) -> None:
        self._config = config
        self._session = session
        self._store = store
        self._backend = backend
        self._tasks = tasks
        self._lock = asyncio.Lock()

    def use_backend(self, backend: BackendClient) -> None:
        self._backend = backend

    @property
    def session(self) -> Session:
        return self._session

    async def received_new_device_token(self, token: str) -> None:
        """Store *token* (lowercase hex) and register it on the backend."""
        _logger.debug("Received device token %s", redact_token(token))
        async with self._lock:
            changed = token != self._session.device_token
            self._session.device_token = token
            await self._persist(save_device_token, token)
            request = self._snapshot(changed)
        self._send(request)

    async def set_custom_data(self, data: Mapping[str, str]) -> None:
        """Replace the custom data wholesale and register it on the backend."""
        new_data = dict(data)
        _logger.debug("Setting custom data %s", redact_for_log(new_data))
        async with self._lock:
            changed = new_data != self._session.custom_data
            self._session.custom_data = new_data
            await self._persist(save_custom_data, self._session.custom_data)
            request = self._snapshot(changed)
        self._send(request)

    def register_on_backend(self) -> None:
        """Schedule a registration with the current session state."""
        self._send(build_registration_request(self._config, self._session))

    def _snapshot(self, changed: bool) -> RegistrationRequest | None:
        if not changed and not self._config.register_unchanged:
            _logger.debug("Registration state unchanged, not contacting backend")
            return None
        return build_registration_request(self._config, self._session)

    async def _persist(self, save: Callable[[KeyValueStore, Any], None], value: Any) -> None:
        # Stores may hit the disk; keep the loop free while the lock is held.
        try:
            await asyncio.to_thread(save, self._store, value)
        except SingleWaveStorageError:
            _logger.warning("Could not persist registration state", exc_info=True)

    def _send(self, request: RegistrationRequest | None) -> None:
        if request is None:
            return
        self._tasks.spawn(self._backend.register(request), name="singlewave-register")

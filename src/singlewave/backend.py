"""Backend client: sends registration and open-tracking requests.

Calls are at-most-once: no retry, no backoff.  Transport errors are
logged at DEBUG and dropped.  With an :class:`~singlewave.outbox.Outbox`
the request is persisted first and replayed by :meth:`flush_outbox` on
the next initialization if the process died before an answer arrived.
"""

from __future__ import annotations

import logging
from typing import Any

from singlewave._api import subscribers as _subscribers_api
from singlewave._constants import OPEN_ENDPOINT, REGISTER_ENDPOINT
from singlewave._transport import Transport
from singlewave.config import SingleWaveConfig
from singlewave.exceptions import SingleWaveStorageError, SingleWaveTransportError
from singlewave.models.notification import NotificationEventRef
from singlewave.models.requests import RegistrationRequest
from singlewave.outbox import Outbox, OutboxEntry

_logger = logging.getLogger(__name__)


class BackendClient:
    """Thin async wrapper around the subscriber endpoints."""

    def __init__(
        self,
        config: SingleWaveConfig,
        transport: Transport,
        *,
        outbox: Outbox | None = None,
    ) -> None:
        self._config = config
        self._transport = transport
        self._outbox = outbox

    async def register(self, request: RegistrationRequest) -> dict[str, Any] | None:
        """Send a registration.  Returns the response, or ``None`` on failure."""
        _logger.debug("Sending registration to SingleWave backend")
        entry = self._enqueue(REGISTER_ENDPOINT, request.to_params())
        try:
            response = await _subscribers_api.register(self._transport, request)
        except SingleWaveTransportError as exc:
            _logger.debug("Registration failed: %s", exc)
            return None
        self._dequeue(entry)
        return response

    async def track_open(self, ref: NotificationEventRef) -> dict[str, Any] | None:
        """Report an open.  Returns the response, or ``None`` on failure."""
        _logger.debug("Sending open tracking to SingleWave backend")
        request = _subscribers_api.build_open_request(self._config, ref)
        entry = self._enqueue(OPEN_ENDPOINT, request.to_params())
        try:
            response = await _subscribers_api.track_open(self._transport, request)
        except SingleWaveTransportError as exc:
            _logger.debug("Open tracking failed: %s", exc)
            return None
        self._dequeue(entry)
        return response

    async def flush_outbox(self) -> int:
        """Replay persisted requests once each.  Returns how many succeeded."""
        if self._outbox is None:
            return 0
        sent = 0
        for entry in self._outbox.entries():
            try:
                await _subscribers_api.post_params(self._transport, entry.endpoint, entry.params)
            except SingleWaveTransportError as exc:
                _logger.debug("Replaying %s failed: %s", entry.endpoint, exc)
                continue
            self._dequeue(entry)
            sent += 1
        if sent:
            _logger.debug("Replayed %d pending request(s)", sent)
        return sent

    def _enqueue(self, endpoint: str, params: list[tuple[str, str]]) -> OutboxEntry | None:
        if self._outbox is None:
            return None
        try:
            return self._outbox.add(endpoint, params)
        except SingleWaveStorageError:
            _logger.debug("Could not persist pending %s request", endpoint, exc_info=True)
            return None

    def _dequeue(self, entry: OutboxEntry | None) -> None:
        if self._outbox is None or entry is None:
            return
        try:
            self._outbox.remove(entry.id)
        except SingleWaveStorageError:
            _logger.debug("Could not remove sent request from outbox", exc_info=True)

"""Notification open tracking."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from singlewave._background import BackgroundTasks
from singlewave.backend import BackendClient
from singlewave.models.notification import NotificationEventRef
from singlewave.providers import NotificationEventSource

_logger = logging.getLogger(__name__)


class EventTracker:
    """Forwards the hash triple of an opened notification to the backend.

    Every callback with a complete triple produces exactly one tracking
    call; repeated opens of the same notification are deduped by the
    backend, not here.  Payloads without the triple are dropped silently.
    """

    def __init__(
        self,
        backend: BackendClient,
        event_source: NotificationEventSource,
        tasks: BackgroundTasks,
    ) -> None:
        self._backend = backend
        self._events = event_source
        self._tasks = tasks

    def use_backend(self, backend: BackendClient) -> None:
        self._backend = backend

    def on_notification_opened(self, payload: Mapping[str, Any]) -> NotificationEventRef | None:
        _logger.debug("Notification opened")
        return self._handle(payload)

    def on_notification_foreground(self, payload: Mapping[str, Any]) -> NotificationEventRef | None:
        # An app in the foreground shows the notification itself, so it
        # counts as opened.
        _logger.debug("Notification received in foreground")
        return self._handle(payload)

    def _handle(self, payload: Mapping[str, Any]) -> NotificationEventRef | None:
        try:
            self._events.clear_badge()
        except Exception:
            _logger.debug("Clearing badge failed", exc_info=True)
        ref = NotificationEventRef.from_payload(payload)
        if ref is None:
            return None
        self._tasks.spawn(self._backend.track_open(ref), name="singlewave-track-open")
        return ref

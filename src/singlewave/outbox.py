"""Durable queue of backend calls that have not completed yet.

Only used when :attr:`SingleWaveConfig.durable_outbox` is enabled.  Each
entry is written to the persistent store before the request is sent and
removed once the backend answered, so a process killed mid-request
replays it on the next initialization.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from singlewave._constants import OUTBOX_KEY
from singlewave.exceptions import SingleWaveStorageError
from singlewave.storage import KeyValueStore

_logger = logging.getLogger(__name__)


class OutboxEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    endpoint: str
    params: list[tuple[str, str]]


_ENTRIES_ADAPTER: TypeAdapter[list[OutboxEntry]] = TypeAdapter(list[OutboxEntry])


class Outbox:
    """Pending requests persisted under ``__swSDKOutbox``."""

    def __init__(self, store: KeyValueStore, *, max_entries: int = 50) -> None:
        self._store = store
        self._max_entries = max_entries

    def entries(self) -> list[OutboxEntry]:
        try:
            raw: Any = self._store.get(OUTBOX_KEY)
        except SingleWaveStorageError:
            _logger.debug("Outbox could not be loaded", exc_info=True)
            return []
        if raw is None:
            return []
        try:
            return _ENTRIES_ADAPTER.validate_python(raw)
        except ValidationError:
            _logger.debug("Discarding outbox of unexpected shape")
            return []

    def _save(self, entries: list[OutboxEntry]) -> None:
        self._store.set(OUTBOX_KEY, _ENTRIES_ADAPTER.dump_python(entries, mode="json"))

    def add(self, endpoint: str, params: list[tuple[str, str]]) -> OutboxEntry:
        """Persist a pending request.  The oldest entries are dropped past the cap."""
        entry = OutboxEntry(endpoint=endpoint, params=list(params))
        entries = self.entries()
        entries.append(entry)
        if len(entries) > self._max_entries:
            dropped = len(entries) - self._max_entries
            _logger.debug("Outbox full, dropping %d oldest entries", dropped)
            entries = entries[dropped:]
        self._save(entries)
        return entry

    def remove(self, entry_id: str) -> None:
        entries = self.entries()
        remaining = [entry for entry in entries if entry.id != entry_id]
        if len(remaining) != len(entries):
            self._save(remaining)

    def __len__(self) -> int:
        return len(self.entries())

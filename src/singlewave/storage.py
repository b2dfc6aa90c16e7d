"""Durable key-value storage for registration state.

The mobile SDKs keep two slots in the platform's user defaults: the
device token and the custom data mapping.  :class:`KeyValueStore` is the
seam the host plugs its own storage into; :class:`JsonFileStore` and
:class:`MemoryStore` cover the common cases.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Protocol

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from singlewave._constants import DEVICE_TOKEN_KEY, USER_DATA_KEY
from singlewave.exceptions import SingleWaveStorageError

_logger = logging.getLogger(__name__)

_CUSTOM_DATA_ADAPTER: TypeAdapter[dict[str, str]] = TypeAdapter(dict[str, str])


class KeyValueStore(Protocol):
    """Structural storage interface.

    Values are JSON-compatible (strings, dicts of strings, lists).
    """

    def get(self, key: str) -> Any | None:
        ...

    def set(self, key: str, value: Any) -> None:
        ...

    def delete(self, key: str) -> None:
        ...


class MemoryStore:
    """In-process store; state is lost when the process exits."""

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._values: dict[str, Any] = dict(initial or {})

    def get(self, key: str) -> Any | None:
        return self._values.get(key)

    def set(self, key: str, value: Any) -> None:
        self._values[key] = value

    def delete(self, key: str) -> None:
        self._values.pop(key, None)


class JsonFileStore:
    """Store backed by a single JSON object on disk.

    Every write rewrites the whole file through a temporary file and
    ``os.replace`` so a crash never leaves a half-written document.
    """

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self.path = Path(path).expanduser()

    def _read(self) -> dict[str, Any]:
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as exc:
            raise SingleWaveStorageError(f"Cannot read {self.path}: {exc}") from exc
        if not text.strip():
            return {}
        try:
            document = json.loads(text)
        except json.JSONDecodeError as exc:
            raise SingleWaveStorageError(f"{self.path} is not valid JSON") from exc
        if not isinstance(document, dict):
            raise SingleWaveStorageError(f"{self.path} does not hold a JSON object")
        return document

    def _write(self, document: dict[str, Any]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=f".{self.path.name}.", dir=self.path.parent)
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(document, handle, ensure_ascii=False, sort_keys=True)
            os.replace(tmp_name, self.path)
        except OSError as exc:
            raise SingleWaveStorageError(f"Cannot write {self.path}: {exc}") from exc

    def get(self, key: str) -> Any | None:
        return self._read().get(key)

    def set(self, key: str, value: Any) -> None:
        try:
            document = self._read()
        except SingleWaveStorageError:
            _logger.debug("Replacing unreadable store %s", self.path, exc_info=True)
            document = {}
        document[key] = value
        self._write(document)

    def delete(self, key: str) -> None:
        document = self._read()
        if document.pop(key, None) is not None:
            self._write(document)


class PersistedState(BaseModel):
    """Registration state restored at startup."""

    model_config = ConfigDict(frozen=True)

    device_token: str | None = None
    custom_data: dict[str, str] = Field(default_factory=dict)


def load_device_token(store: KeyValueStore) -> str | None:
    """Return the stored device token, or ``None`` if absent or unreadable."""
    try:
        value = store.get(DEVICE_TOKEN_KEY)
    except SingleWaveStorageError:
        _logger.debug("Device token could not be loaded", exc_info=True)
        return None
    return value if isinstance(value, str) else None


def load_custom_data(store: KeyValueStore) -> dict[str, str]:
    """Return the stored custom data, or ``{}`` if absent or invalid."""
    try:
        value = store.get(USER_DATA_KEY)
    except SingleWaveStorageError:
        _logger.debug("Custom data could not be loaded", exc_info=True)
        return {}
    if value is None:
        return {}
    try:
        return _CUSTOM_DATA_ADAPTER.validate_python(value, strict=True)
    except ValidationError:
        _logger.debug("Ignoring stored custom data of unexpected shape")
        return {}


def load_state(store: KeyValueStore) -> PersistedState:
    """Read both slots.  Missing or damaged slots fall back to defaults."""
    return PersistedState(
        device_token=load_device_token(store),
        custom_data=load_custom_data(store),
    )


def save_device_token(store: KeyValueStore, token: str) -> None:
    store.set(DEVICE_TOKEN_KEY, token)


def save_custom_data(store: KeyValueStore, data: dict[str, str]) -> None:
    store.set(USER_DATA_KEY, dict(data))

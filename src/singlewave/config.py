"""Client configuration for singlewave."""

from __future__ import annotations

import dataclasses
import locale
import os
from typing import Any

from singlewave._constants import BASE_URL, DEFAULT_LANGUAGE, PLATFORM


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def device_language() -> str:
    """Return the language code of the current locale (``"en_US"`` -> ``"en"``)."""
    try:
        name = locale.getlocale()[0]
    except ValueError:
        name = None
    if not name or name in {"C", "POSIX"}:
        return DEFAULT_LANGUAGE
    code = name.replace("-", "_").split("_", 1)[0].strip().lower()
    return code or DEFAULT_LANGUAGE


@dataclasses.dataclass(frozen=True)
class SingleWaveConfig:
    """Client configuration.

    Parameters
    ----------
    base_url : str
        Backend base URL.
    platform : str
        Platform literal sent with every request.
    language : str
        Device language code sent on registration.  Defaults to the
        language of the current locale.
    debug : bool
        Emit routine SDK messages (the ``singlewave`` logger is lowered
        to DEBUG on initialization).
    register_unchanged : bool
        Re-register on the backend even when the device token or custom
        data did not change.  The backend dedupes, so this defaults to
        ``True``.
    legacy_custom_data_encoding : bool
        Build the ``data`` parameter the way the iOS SDK builds it:
        ``"key":"value"`` pairs concatenated with no separator and no
        escaping.  Off by default; the standard JSON encoder is used.
    durable_outbox : bool
        Queue pending backend calls in the persistent store and flush
        them on the next initialization.
    store_path : str or None
        Location of the JSON file used as persistent store when the host
        does not supply its own store.  ``None`` keeps state in memory.
    """

    base_url: str = BASE_URL
    platform: str = PLATFORM
    language: str = dataclasses.field(default_factory=device_language)
    debug: bool = False
    register_unchanged: bool = True
    legacy_custom_data_encoding: bool = False
    durable_outbox: bool = False
    store_path: str | None = None

    @classmethod
    def from_env(cls, **overrides: Any) -> SingleWaveConfig:
        """Create configuration from ``SINGLEWAVE_*`` environment variables.

        Explicit keyword arguments override environment values.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "SINGLEWAVE_BASE_URL": "base_url",
            "SINGLEWAVE_PLATFORM": "platform",
            "SINGLEWAVE_LANGUAGE": "language",
            "SINGLEWAVE_STORE_PATH": "store_path",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        _ENV_BOOL_MAP = {
            "SINGLEWAVE_DEBUG": ("debug", False),
            "SINGLEWAVE_REGISTER_UNCHANGED": ("register_unchanged", True),
            "SINGLEWAVE_LEGACY_CUSTOM_DATA_ENCODING": ("legacy_custom_data_encoding", False),
            "SINGLEWAVE_DURABLE_OUTBOX": ("durable_outbox", False),
        }
        for env_key, (field_name, default) in _ENV_BOOL_MAP.items():
            if field_name not in overrides:
                config_kwargs[field_name] = _env_bool(env.get(env_key), default)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)

"""Custom exception hierarchy for singlewave."""

from __future__ import annotations


class SingleWaveError(Exception):
    """Base exception for all singlewave errors."""


class SingleWaveConfigError(SingleWaveError):
    """Invalid or missing configuration."""


class SingleWaveNotInitializedError(SingleWaveError):
    """An operation needs a session but ``initialize`` was never called."""


class SingleWaveStorageError(SingleWaveError):
    """The persistent store could not be read or written."""


class SingleWaveDeviceTokenError(SingleWaveError):
    """A device token handed over by the host could not be decoded."""


class SingleWaveTransportError(SingleWaveError):
    """HTTP-level failure (network error or non-2xx status)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)

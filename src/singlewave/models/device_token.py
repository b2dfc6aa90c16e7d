"""Device token normalization."""

from __future__ import annotations

import string

from singlewave.exceptions import SingleWaveDeviceTokenError

_HEX_DIGITS = frozenset(string.hexdigits)


def device_token_hex(token: bytes | bytearray | memoryview | str) -> str:
    """Return *token* as a lowercase hex string.

    Raw tokens from the push service are bytes.  Adapters that already
    hold a hex string (any case, optionally with spaces or ``<>`` as
    printed by some platforms) may pass it as-is.
    """
    if isinstance(token, (bytes, bytearray, memoryview)):
        return bytes(token).hex()
    if isinstance(token, str):
        cleaned = token.strip().strip("<>").replace(" ", "")
        if not set(cleaned) <= _HEX_DIGITS or len(cleaned) % 2:
            raise SingleWaveDeviceTokenError(f"Device token is not a hex string ({len(token)} chars)")
        return cleaned.lower()
    raise SingleWaveDeviceTokenError(f"Unsupported device token type: {type(token).__name__}")

"""Shared helpers for SingleWave endpoint modules.

It is internal to singlewave and may change at any time.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any

from singlewave._redact import redact_for_log
from singlewave._transport import Transport

_logger = logging.getLogger(__name__)


def encode_custom_data(data: Mapping[str, str], *, legacy: bool = False) -> str:
    """Serialize custom data into the JSON object string sent as ``data``.

    With ``legacy=True`` the string is built the way the iOS SDK
    builds it: every ``"key":"value"`` pair appended with no separator and
    nothing escaped.  The result is only valid JSON for zero or one entry
    whose key and value hold no quote or backslash.
    """
    if legacy:
        return "{" + "".join(f'"{key}":"{value}"' for key, value in data.items()) + "}"
    return json.dumps(dict(data), separators=(",", ":"), ensure_ascii=False)


async def post_form_json(
    *,
    endpoint: str,
    transport: Transport,
    params: list[tuple[str, str]],
) -> dict[str, Any]:
    """Post *params* and log the decoded response.

    The response is not interpreted beyond logging.
    """
    _logger.debug("Request %s params=%s", endpoint, redact_for_log(dict(params)))
    response = await transport.post_form(endpoint, params)
    _logger.debug("Response %s: %s", endpoint, redact_for_log(response))
    return response

"""HTTP transport posting form-encoded parameters to the SingleWave backend."""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from typing import Any, Protocol
from urllib.parse import quote, urlencode

import aiohttp

from singlewave._constants import USER_AGENT
from singlewave.config import SingleWaveConfig
from singlewave.exceptions import SingleWaveTransportError

_logger = logging.getLogger(__name__)

# Characters URLComponents leaves unescaped inside a query item value.
_QUERY_SAFE = "!$&'()*,;=:@/?"


def encode_form(params: Sequence[tuple[str, str]]) -> str:
    """Percent-encode *params* into a query string, keeping their order.

    ``&``, ``=`` and ``+`` are always escaped so that values cannot break
    out of their field.
    """
    safe = _QUERY_SAFE.replace("&", "").replace("=", "")
    return urlencode(list(params), quote_via=quote, safe=safe)


class Transport(Protocol):
    """Structural transport interface used by endpoint modules.

    Having a protocol here makes it easy to pass test doubles while
    keeping the production implementation (`FormTransport`) concrete.
    """

    async def post_form(self, endpoint: str, params: Sequence[tuple[str, str]]) -> dict[str, Any]:
        ...


class FormTransport:
    """POST the parameters as an ``application/x-www-form-urlencoded`` body."""

    def __init__(
        self,
        config: SingleWaveConfig,
        http_session: aiohttp.ClientSession,
    ) -> None:
        self._config = config
        self._http = http_session

    async def post_form(self, endpoint: str, params: Sequence[tuple[str, str]]) -> dict[str, Any]:
        """Send *params* to *endpoint* and return the decoded JSON object.

        The endpoint URL carries no query string; the same parameters are
        sent in the body.  A body that is not a JSON object decodes to
        ``{}``.
        """
        url = f"{self._config.base_url.rstrip('/')}{endpoint}"
        body = encode_form(params)
        headers = {
            "content-type": "application/x-www-form-urlencoded; charset=utf-8",
            "accept": "application/json",
            "user-agent": USER_AGENT,
        }

        _logger.debug("POST %s", url)

        try:
            async with self._http.post(url, data=body.encode("utf-8"), headers=headers) as resp:
                text = await resp.text()
                if resp.status >= 300:
                    raise SingleWaveTransportError(
                        f"HTTP {resp.status} from {endpoint}: {text[:200]}",
                        status_code=resp.status,
                        endpoint=endpoint,
                    )
        except SingleWaveTransportError:
            raise
        except aiohttp.ClientError as exc:
            raise SingleWaveTransportError(
                f"Request to {endpoint} failed: {exc}",
                endpoint=endpoint,
            ) from exc

        try:
            body_json = json.loads(text)
        except json.JSONDecodeError:
            _logger.debug("Response from %s is not JSON: %s", endpoint, text[:200])
            return {}

        if not isinstance(body_json, dict):
            _logger.debug("Response from %s is not a JSON object", endpoint)
            return {}
        return body_json

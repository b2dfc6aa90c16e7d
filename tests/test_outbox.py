from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import pytest

from singlewave.backend import BackendClient
from singlewave.config import SingleWaveConfig
from singlewave.exceptions import SingleWaveTransportError
from singlewave.models import NotificationEventRef, RegistrationRequest
from singlewave.outbox import Outbox
from singlewave.storage import MemoryStore


class _FlakyTransport:
    def __init__(self, fail: bool) -> None:
        self.fail = fail
        self.calls: list[tuple[str, list[tuple[str, str]]]] = []

    async def post_form(self, endpoint: str, params: Sequence[tuple[str, str]]) -> dict[str, Any]:
        self.calls.append((endpoint, list(params)))
        if self.fail:
            raise SingleWaveTransportError("offline", endpoint=endpoint)
        return {"ok": True}


_REQUEST = RegistrationRequest(language="en", project_hash="PROJ", token="abcd", custom_data_json="{}")


@pytest.mark.asyncio
async def test_successful_request_leaves_outbox_empty() -> None:
    store = MemoryStore()
    outbox = Outbox(store)
    backend = BackendClient(SingleWaveConfig(language="en"), _FlakyTransport(fail=False), outbox=outbox)

    assert await backend.register(_REQUEST) == {"ok": True}
    assert len(outbox) == 0


@pytest.mark.asyncio
async def test_failed_request_is_replayed_on_next_launch() -> None:
    store = MemoryStore()
    config = SingleWaveConfig(language="en")
    offline = BackendClient(config, _FlakyTransport(fail=True), outbox=Outbox(store))

    assert await offline.register(_REQUEST) is None
    ref = NotificationEventRef(notificationHash="n", openHash="o", controlHash="c")
    assert await offline.track_open(ref) is None
    assert len(Outbox(store)) == 2

    transport = _FlakyTransport(fail=False)
    online = BackendClient(config, transport, outbox=Outbox(store))
    assert await online.flush_outbox() == 2

    assert [endpoint for endpoint, _ in transport.calls] == [
        "/v1/subscribers/register",
        "/v1/subscribers/open",
    ]
    assert transport.calls[0][1] == _REQUEST.to_params()
    assert len(Outbox(store)) == 0


@pytest.mark.asyncio
async def test_flush_keeps_entries_that_fail_again() -> None:
    store = MemoryStore()
    config = SingleWaveConfig(language="en")
    backend = BackendClient(config, _FlakyTransport(fail=True), outbox=Outbox(store))
    await backend.register(_REQUEST)

    assert await backend.flush_outbox() == 0
    assert len(Outbox(store)) == 1


def test_outbox_caps_entries() -> None:
    outbox = Outbox(MemoryStore(), max_entries=2)
    for i in range(3):
        outbox.add("/v1/subscribers/open", [("openHash", str(i))])

    assert [entry.params for entry in outbox.entries()] == [[("openHash", "1")], [("openHash", "2")]]


def test_outbox_of_unexpected_shape_is_discarded() -> None:
    outbox = Outbox(MemoryStore({"__swSDKOutbox": "garbage"}))
    assert outbox.entries() == []


@pytest.mark.asyncio
async def test_without_outbox_flush_is_noop() -> None:
    backend = BackendClient(SingleWaveConfig(language="en"), _FlakyTransport(fail=False))
    assert await backend.flush_outbox() == 0

from __future__ import annotations

import asyncio
import threading
from collections.abc import Sequence
from typing import Any

import pytest

from singlewave._background import BackgroundTasks
from singlewave.backend import BackendClient
from singlewave.config import SingleWaveConfig
from singlewave.exceptions import SingleWaveTransportError
from singlewave.models import Session
from singlewave.registration import RegistrationManager
from singlewave.storage import MemoryStore, load_state


class _RecordingTransport:
    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.calls: list[tuple[str, dict[str, str]]] = []

    async def post_form(self, endpoint: str, params: Sequence[tuple[str, str]]) -> dict[str, Any]:
        self.calls.append((endpoint, dict(params)))
        if self.fail:
            raise SingleWaveTransportError("offline", endpoint=endpoint)
        return {"ok": True}


def _manager(
    transport: _RecordingTransport,
    *,
    store: MemoryStore | None = None,
    config: SingleWaveConfig | None = None,
    session: Session | None = None,
) -> tuple[RegistrationManager, MemoryStore, BackgroundTasks]:
    config = config or SingleWaveConfig(language="en")
    store = store or MemoryStore()
    tasks = BackgroundTasks()
    manager = RegistrationManager(
        config,
        session or Session(project_id="PROJ"),
        store,
        BackendClient(config, transport),
        tasks,
    )
    return manager, store, tasks


@pytest.mark.asyncio
async def test_new_token_is_persisted_and_registered_once() -> None:
    transport = _RecordingTransport()
    manager, store, tasks = _manager(transport)
    token = bytes(range(32)).hex()

    await manager.received_new_device_token(token)
    await tasks.wait_idle()

    assert manager.session.device_token == token
    assert load_state(store).device_token == token
    assert len(transport.calls) == 1
    endpoint, params = transport.calls[0]
    assert endpoint == "/v1/subscribers/register"
    assert params["token"] == token
    assert params["hash"] == "PROJ"


@pytest.mark.asyncio
async def test_empty_token_round_trips() -> None:
    transport = _RecordingTransport()
    manager, store, tasks = _manager(transport)

    await manager.received_new_device_token("")
    await tasks.wait_idle()

    assert load_state(store).device_token == ""
    assert transport.calls[0][1]["token"] == ""


@pytest.mark.asyncio
async def test_unchanged_token_still_registers_by_default() -> None:
    transport = _RecordingTransport()
    manager, _, tasks = _manager(transport, session=Session(project_id="PROJ", device_token="abcd"))

    await manager.received_new_device_token("abcd")
    await manager.received_new_device_token("abcd")
    await tasks.wait_idle()

    assert len(transport.calls) == 2


@pytest.mark.asyncio
async def test_unchanged_values_skip_backend_when_configured() -> None:
    transport = _RecordingTransport()
    config = SingleWaveConfig(language="en", register_unchanged=False)
    manager, store, tasks = _manager(
        transport,
        config=config,
        session=Session(project_id="PROJ", device_token="abcd", custom_data={"a": "1"}),
    )

    await manager.received_new_device_token("abcd")
    await manager.set_custom_data({"a": "1"})
    await tasks.wait_idle()
    assert transport.calls == []
    assert load_state(store).device_token == "abcd"

    await manager.received_new_device_token("beef")
    await tasks.wait_idle()
    assert len(transport.calls) == 1


@pytest.mark.asyncio
async def test_custom_data_replaces_wholesale() -> None:
    transport = _RecordingTransport()
    manager, store, tasks = _manager(
        transport,
        session=Session(project_id="PROJ", custom_data={"old": "x"}),
    )

    await manager.set_custom_data({"a": "1", "b": "2"})
    await tasks.wait_idle()

    assert manager.session.custom_data == {"a": "1", "b": "2"}
    assert load_state(store).custom_data == {"a": "1", "b": "2"}
    assert transport.calls[0][1]["data"] == '{"a":"1","b":"2"}'


@pytest.mark.asyncio
async def test_custom_data_snapshot_is_not_shared_with_caller() -> None:
    transport = _RecordingTransport()
    manager, _, tasks = _manager(transport)
    data = {"a": "1"}

    await manager.set_custom_data(data)
    data["b"] = "2"
    await tasks.wait_idle()

    assert manager.session.custom_data == {"a": "1"}


@pytest.mark.asyncio
async def test_network_failure_is_swallowed() -> None:
    transport = _RecordingTransport(fail=True)
    manager, store, tasks = _manager(transport)

    await manager.received_new_device_token("abcd")
    await tasks.wait_idle()

    assert len(transport.calls) == 1
    assert load_state(store).device_token == "abcd"


@pytest.mark.asyncio
async def test_concurrent_updates_keep_each_request_consistent() -> None:
    transport = _RecordingTransport()
    manager, _, tasks = _manager(transport)

    await asyncio.gather(
        manager.received_new_device_token("aaaa"),
        manager.set_custom_data({"k": "v"}),
        manager.received_new_device_token("bbbb"),
    )
    await tasks.wait_idle()

    assert len(transport.calls) == 3
    assert manager.session.device_token == "bbbb"
    assert manager.session.custom_data == {"k": "v"}
    tokens = [params["token"] for _, params in transport.calls]
    assert set(tokens) <= {"aaaa", "bbbb"}


@pytest.mark.asyncio
async def test_register_on_backend_uses_current_state() -> None:
    transport = _RecordingTransport()
    manager, _, tasks = _manager(
        transport,
        session=Session(project_id="PROJ", device_token="cafe", custom_data={"x": "y"}),
    )

    manager.register_on_backend()
    await tasks.wait_idle()

    params = transport.calls[0][1]
    assert params["token"] == "cafe"
    assert params["data"] == '{"x":"y"}'


class _ThreadRecordingStore(MemoryStore):
    def __init__(self) -> None:
        super().__init__()
        self.write_threads: list[int] = []

    def set(self, key: str, value: Any) -> None:
        self.write_threads.append(threading.get_ident())
        super().set(key, value)


@pytest.mark.asyncio
async def test_persistence_runs_off_the_event_loop_thread() -> None:
    transport = _RecordingTransport()
    store = _ThreadRecordingStore()
    manager, _, tasks = _manager(transport, store=store)

    await manager.received_new_device_token("abcd")
    await manager.set_custom_data({"a": "1"})
    await tasks.wait_idle()

    assert len(store.write_threads) == 2
    assert threading.get_ident() not in store.write_threads
    assert load_state(store).device_token == "abcd"

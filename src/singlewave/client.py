"""High-level async client for the SingleWave push backend."""

from __future__ import annotations

import asyncio
import logging
import threading
from collections.abc import Callable, Mapping
from typing import Any

import aiohttp

from singlewave._background import BackgroundTasks
from singlewave._redact import redact_for_log, redact_token
from singlewave._transport import FormTransport, Transport
from singlewave._version import __version__
from singlewave.backend import BackendClient
from singlewave.config import SingleWaveConfig
from singlewave.exceptions import (
    SingleWaveConfigError,
    SingleWaveDeviceTokenError,
    SingleWaveError,
    SingleWaveNotInitializedError,
)
from singlewave.models.device_token import device_token_hex
from singlewave.models.permission import FOREGROUND_PRESENTATION, PresentationOption
from singlewave.models.session import Session
from singlewave.outbox import Outbox
from singlewave.permissions import PermissionCoordinator
from singlewave.providers import (
    NotificationEventSource,
    NotificationPermissionProvider,
    NullEventSource,
    PushTokenProvider,
)
from singlewave.registration import RegistrationManager
from singlewave.storage import JsonFileStore, KeyValueStore, MemoryStore, load_state
from singlewave.tracking import EventTracker

_logger = logging.getLogger(__name__)
_package_logger = logging.getLogger("singlewave")


def _default_store(config: SingleWaveConfig) -> KeyValueStore:
    if config.store_path:
        return JsonFileStore(config.store_path)
    return MemoryStore()


class SingleWaveClient:
    """Device registration and open tracking for one application process.

    Usage::

        async with SingleWaveClient(
            permission_provider=permissions,
            push_token_provider=push,
            event_source=delegate,
        ) as client:
            await client.initialize("PROJECT_ID", debug=True)
            client.set_custom_data({"plan": "pro"})

    The platform adapter reports events through the ``on_*`` methods,
    which may be called from any thread.  Nothing in this client raises
    into those callbacks; failures are logged.

    Only one client per process is expected.  Calling :meth:`initialize`
    again replaces the session; the last call wins.
    """

    def __init__(
        self,
        config: SingleWaveConfig | None = None,
        *,
        permission_provider: NotificationPermissionProvider,
        push_token_provider: PushTokenProvider,
        event_source: NotificationEventSource | None = None,
        store: KeyValueStore | None = None,
        session: aiohttp.ClientSession | None = None,
        transport: Transport | None = None,
    ) -> None:
        self._config = config or SingleWaveConfig()
        self._event_source: NotificationEventSource = event_source or NullEventSource()
        self._store = store if store is not None else _default_store(self._config)
        self._external_session = session is not None
        self._http_session = session
        self._transport = transport
        self._loop: asyncio.AbstractEventLoop | None = None
        self._loop_thread: int | None = None
        self._tasks = BackgroundTasks()
        self._backend: BackendClient | None = None
        self._permissions = PermissionCoordinator(permission_provider, push_token_provider)
        self._registration: RegistrationManager | None = None
        self._tracker: EventTracker | None = None

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> SingleWaveClient:
        await self.start()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.aclose()

    async def start(self) -> None:
        """Bind to the running loop and open the HTTP session."""
        if self._backend is not None:
            return
        self._loop = asyncio.get_running_loop()
        self._loop_thread = threading.get_ident()
        if self._transport is None:
            if self._http_session is None:
                self._http_session = aiohttp.ClientSession()
            self._transport = FormTransport(self._config, self._http_session)
        outbox = Outbox(self._store) if self._config.durable_outbox else None
        self._backend = BackendClient(self._config, self._transport, outbox=outbox)
        # A restarted client keeps its session; point it at the new backend.
        if self._registration is not None:
            self._registration.use_backend(self._backend)
        if self._tracker is not None:
            self._tracker.use_backend(self._backend)

    async def aclose(self) -> None:
        """Wait for in-flight requests, then release the HTTP session."""
        await self._tasks.wait_idle()
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
            self._transport = None
        self._backend = None
        self._loop = None
        self._loop_thread = None

    async def wait_idle(self) -> None:
        """Wait until every scheduled permission, registration and tracking call finished."""
        await self._tasks.wait_idle()

    # ------------------------------------------------------------------
    # Initialization
    # ------------------------------------------------------------------

    @property
    def session(self) -> Session | None:
        """The current session, ``None`` before :meth:`initialize`."""
        if self._registration is None:
            return None
        return self._registration.session

    @property
    def config(self) -> SingleWaveConfig:
        return self._config

    async def initialize(
        self,
        project_id: str,
        launch_options: Mapping[str, Any] | None = None,
        *,
        debug: bool | None = None,
    ) -> Session:
        """Restore state, hook into the platform and start the permission flow.

        Raises
        ------
        SingleWaveConfigError
            If *project_id* is empty.
        """
        if not isinstance(project_id, str) or not project_id.strip():
            raise SingleWaveConfigError("project_id must be a non-empty string")
        await self.start()
        backend = self._require_backend()

        debug_mode = self._config.debug if debug is None else debug
        _package_logger.setLevel(logging.DEBUG if debug_mode else logging.NOTSET)

        _logger.info("Initializing SingleWave %s", __version__)
        if self._registration is not None:
            _logger.warning(
                "SingleWave initialized again; project %s replaces %s",
                project_id,
                self._registration.session.project_id,
            )
        _logger.debug(
            "Project id %s, launch options %s, debug %s",
            project_id,
            redact_for_log(dict(launch_options or {})),
            debug_mode,
        )

        state = load_state(self._store)
        session = Session(
            project_id=project_id,
            device_token=state.device_token or "",
            custom_data=state.custom_data,
            debug=debug_mode,
        )
        self._registration = RegistrationManager(self._config, session, self._store, backend, self._tasks)
        self._tracker = EventTracker(backend, self._event_source, self._tasks)

        self._event_source.install(self)
        self._clear_badge()

        _logger.debug("Restored custom data: %s", redact_for_log(session.custom_data))
        _logger.debug("Restored device token: %s", redact_token(session.device_token))

        self._tasks.spawn(self._run_permission_flow(), name="singlewave-permissions")
        if self._config.durable_outbox:
            self._tasks.spawn(backend.flush_outbox(), name="singlewave-outbox")
        return session

    async def _run_permission_flow(self) -> None:
        # Re-registering when already authorized catches tokens the push
        # service rotated while the app was not running.
        await self._permissions.check_permissions()
        await self._permissions.prompt_push_permissions()

    # ------------------------------------------------------------------
    # Host API
    # ------------------------------------------------------------------

    def set_custom_data(self, data: Mapping[str, str]) -> None:
        """Replace the custom attributes and re-register."""
        if not all(isinstance(k, str) and isinstance(v, str) for k, v in data.items()):
            _logger.warning("Custom data must map strings to strings; ignoring update")
            return
        snapshot = dict(data)
        self._dispatch(lambda: self._spawn_registration("set_custom_data", snapshot))

    def prompt_push_permissions(self) -> None:
        """Show the platform's permission prompt (through the provider)."""
        self._dispatch(
            lambda: self._tasks.spawn(self._permissions.prompt_push_permissions(), name="singlewave-prompt")
        )

    def register_on_backend(self) -> None:
        """Send the current registration state again."""
        self._dispatch(lambda: self._require_registration().register_on_backend())

    # ------------------------------------------------------------------
    # Platform callbacks
    # ------------------------------------------------------------------

    def on_token_received(self, token: bytes | str) -> None:
        try:
            token_hex = device_token_hex(token)
        except SingleWaveDeviceTokenError as exc:
            _logger.warning("Ignoring device token: %s", exc)
            return
        _logger.debug("Registered for remote notifications: %s", redact_token(token_hex))
        self._dispatch(lambda: self._spawn_registration("received_new_device_token", token_hex))

    def on_token_registration_failed(self, error: BaseException | str) -> None:
        _logger.warning("Failed to register for push notifications: %s", error)

    def on_notification_opened(self, payload: Mapping[str, Any]) -> None:
        self._dispatch(lambda: self._require_tracker().on_notification_opened(payload))

    def on_notification_foreground(self, payload: Mapping[str, Any]) -> tuple[PresentationOption, ...]:
        """Track a notification shown while the app is active.

        Returns the presentation options the adapter should apply.
        """
        self._dispatch(lambda: self._require_tracker().on_notification_foreground(payload))
        return FOREGROUND_PRESENTATION

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _require_backend(self) -> BackendClient:
        if self._backend is None:
            raise SingleWaveError("Client not started. Use 'async with SingleWaveClient(...) as client:'")
        return self._backend

    def _require_registration(self) -> RegistrationManager:
        if self._registration is None:
            raise SingleWaveNotInitializedError("Call initialize() before using the client")
        return self._registration

    def _require_tracker(self) -> EventTracker:
        if self._tracker is None:
            raise SingleWaveNotInitializedError("Call initialize() before using the client")
        return self._tracker

    def _spawn_registration(self, method: str, value: Any) -> None:
        manager = self._require_registration()
        self._tasks.spawn(getattr(manager, method)(value), name=f"singlewave-{method}")

    def _clear_badge(self) -> None:
        try:
            self._event_source.clear_badge()
        except Exception:
            _logger.debug("Clearing badge failed", exc_info=True)

    def _dispatch(self, fn: Callable[[], Any]) -> None:
        """Run *fn* on the client's loop, hopping threads if needed."""
        loop = self._loop
        if loop is None or loop.is_closed():
            _logger.debug("SingleWave client not running; dropping event")
            return
        if threading.get_ident() == self._loop_thread:
            self._run_guarded(fn)
        else:
            loop.call_soon_threadsafe(self._run_guarded, fn)

    def _run_guarded(self, fn: Callable[[], Any]) -> None:
        try:
            fn()
        except SingleWaveNotInitializedError:
            _logger.debug("SingleWave not initialized; dropping event")
        except Exception:
            _logger.debug("Handling SingleWave event failed", exc_info=True)

"""Capability interfaces the host wires to its platform adapters.

The SDK never touches OS notification APIs itself.  It asks for the
authorization state, asks for push registration and receives events
through these three protocols.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol

from singlewave.models.permission import AuthorizationOption, AuthorizationStatus, PresentationOption


class NotificationPermissionProvider(Protocol):
    """Reads and requests the application's notification authorization."""

    async def get_authorization_status(self) -> AuthorizationStatus | str:
        ...

    async def request_authorization(self, options: frozenset[AuthorizationOption]) -> bool:
        """Prompt the user.  Returns whether authorization was granted."""
        ...


class PushTokenProvider(Protocol):
    """Asks the platform push service for a (possibly new) device token.

    The token arrives later through :meth:`NotificationHandler.on_token_received`.
    """

    def register_for_remote_notifications(self) -> None:
        ...


class NotificationHandler(Protocol):
    """Callbacks a :class:`NotificationEventSource` delivers events to."""

    def on_token_received(self, token: bytes | str) -> None:
        ...

    def on_token_registration_failed(self, error: BaseException | str) -> None:
        ...

    def on_notification_opened(self, payload: Mapping[str, Any]) -> None:
        ...

    def on_notification_foreground(self, payload: Mapping[str, Any]) -> tuple[PresentationOption, ...]:
        ...


class NotificationEventSource(Protocol):
    """Platform delegate: forwards token and notification events, owns the badge."""

    def install(self, handler: NotificationHandler) -> None:
        ...

    def clear_badge(self) -> None:
        ...


class NullEventSource:
    """Event source for hosts that call the handler methods directly."""

    def install(self, handler: NotificationHandler) -> None:
        return None

    def clear_badge(self) -> None:
        return None

"""Notification permission negotiation."""

from __future__ import annotations

import logging

from singlewave.models.permission import DEFAULT_AUTHORIZATION_OPTIONS, AuthorizationStatus
from singlewave.providers import NotificationPermissionProvider, PushTokenProvider

_logger = logging.getLogger(__name__)

_STATUS_MESSAGES: dict[AuthorizationStatus, str] = {
    AuthorizationStatus.DENIED: "User denied notification permission",
    AuthorizationStatus.NOT_DETERMINED: "Notification permission has not been requested yet",
    AuthorizationStatus.PROVISIONAL: "Application may post non-interruptive notifications",
    AuthorizationStatus.EPHEMERAL: "Application is temporarily authorized to post notifications",
    AuthorizationStatus.UNKNOWN: "Unknown notification authorization status",
}


class PermissionCoordinator:
    """Checks and requests authorization, then asks for a push token.

    A granted or already-authorized state always triggers token
    registration, so a token the push service rotated silently reaches
    the backend.  Denial never unregisters the device.
    """

    def __init__(
        self,
        permission_provider: NotificationPermissionProvider,
        push_token_provider: PushTokenProvider,
    ) -> None:
        self._permissions = permission_provider
        self._push = push_token_provider

    async def check_permissions(self) -> AuthorizationStatus | None:
        """Register for a token if notifications are already authorized.

        Returns the observed status, or ``None`` when the provider failed.
        """
        try:
            status = AuthorizationStatus(await self._permissions.get_authorization_status())
        except Exception:
            _logger.debug("Querying notification authorization failed", exc_info=True)
            return None

        if status is AuthorizationStatus.AUTHORIZED:
            _logger.debug("User granted permission for notifications")
            self._register_for_token()
        else:
            _logger.debug(_STATUS_MESSAGES[status])
        return status

    async def prompt_push_permissions(self) -> bool:
        """Request alert, sound and badge authorization.

        Returns whether it was granted.
        """
        _logger.debug("Requesting notification permissions")
        try:
            granted = bool(await self._permissions.request_authorization(DEFAULT_AUTHORIZATION_OPTIONS))
        except Exception:
            _logger.debug("Requesting notification authorization failed", exc_info=True)
            return False

        if not granted:
            _logger.debug("Notification permission not granted, keeping existing registration")
            return False

        _logger.debug("Notification permission granted")
        self._register_for_token()
        return True

    def _register_for_token(self) -> None:
        try:
            self._push.register_for_remote_notifications()
        except Exception:
            _logger.debug("Push token registration request failed", exc_info=True)

from __future__ import annotations

import pytest

from singlewave.models import AuthorizationOption, AuthorizationStatus
from singlewave.permissions import PermissionCoordinator


class _Permissions:
    def __init__(self, status: AuthorizationStatus | str = AuthorizationStatus.NOT_DETERMINED, grant: bool = True) -> None:
        self.status = status
        self.grant = grant
        self.requested: list[frozenset[AuthorizationOption]] = []
        self.fail = False

    async def get_authorization_status(self) -> AuthorizationStatus | str:
        if self.fail:
            raise RuntimeError("settings unavailable")
        return self.status

    async def request_authorization(self, options: frozenset[AuthorizationOption]) -> bool:
        self.requested.append(options)
        if self.fail:
            raise RuntimeError("prompt unavailable")
        return self.grant


class _Push:
    def __init__(self) -> None:
        self.registrations = 0

    def register_for_remote_notifications(self) -> None:
        self.registrations += 1


@pytest.mark.asyncio
async def test_authorized_status_always_registers_for_token() -> None:
    push = _Push()
    coordinator = PermissionCoordinator(_Permissions(AuthorizationStatus.AUTHORIZED), push)

    assert await coordinator.check_permissions() is AuthorizationStatus.AUTHORIZED
    await coordinator.check_permissions()

    assert push.registrations == 2


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "status",
    [
        AuthorizationStatus.DENIED,
        AuthorizationStatus.NOT_DETERMINED,
        AuthorizationStatus.PROVISIONAL,
        AuthorizationStatus.EPHEMERAL,
        "brand-new-status",
    ],
)
async def test_other_statuses_only_log(status: AuthorizationStatus | str) -> None:
    push = _Push()
    coordinator = PermissionCoordinator(_Permissions(status), push)

    await coordinator.check_permissions()

    assert push.registrations == 0


@pytest.mark.asyncio
async def test_prompt_requests_alert_sound_badge_and_registers_when_granted() -> None:
    permissions = _Permissions(grant=True)
    push = _Push()

    assert await PermissionCoordinator(permissions, push).prompt_push_permissions() is True

    assert permissions.requested == [
        frozenset({AuthorizationOption.ALERT, AuthorizationOption.SOUND, AuthorizationOption.BADGE})
    ]
    assert push.registrations == 1


@pytest.mark.asyncio
async def test_prompt_denied_does_not_register() -> None:
    push = _Push()

    assert await PermissionCoordinator(_Permissions(grant=False), push).prompt_push_permissions() is False

    assert push.registrations == 0


@pytest.mark.asyncio
async def test_provider_failures_are_non_events() -> None:
    permissions = _Permissions()
    permissions.fail = True
    push = _Push()
    coordinator = PermissionCoordinator(permissions, push)

    assert await coordinator.check_permissions() is None
    assert await coordinator.prompt_push_permissions() is False
    assert push.registrations == 0

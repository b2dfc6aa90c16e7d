"""Notification permission states reported by the platform."""

from __future__ import annotations

from enum import StrEnum


class AuthorizationStatus(StrEnum):
    """Current notification authorization of the application.

    Values a provider returns that have no member resolve to
    :attr:`UNKNOWN` instead of raising ``ValueError``.
    """

    AUTHORIZED = "authorized"
    DENIED = "denied"
    NOT_DETERMINED = "not_determined"
    PROVISIONAL = "provisional"
    EPHEMERAL = "ephemeral"
    UNKNOWN = "unknown"

    @classmethod
    def _missing_(cls, value: object) -> AuthorizationStatus:
        if isinstance(value, str):
            normalized = value.strip().lower().replace("-", "_")
            if normalized == "notdetermined":
                return cls.NOT_DETERMINED
            for member in cls:
                if member.value == normalized:
                    return member
        return cls.UNKNOWN


class AuthorizationOption(StrEnum):
    """Kinds of interruption requested when prompting the user."""

    ALERT = "alert"
    SOUND = "sound"
    BADGE = "badge"


#: Options requested by :meth:`PermissionCoordinator.prompt_push_permissions`.
DEFAULT_AUTHORIZATION_OPTIONS: frozenset[AuthorizationOption] = frozenset(
    {AuthorizationOption.ALERT, AuthorizationOption.SOUND, AuthorizationOption.BADGE}
)


class PresentationOption(StrEnum):
    """How a notification received in the foreground should be shown."""

    BANNER = "banner"
    LIST = "list"
    BADGE = "badge"
    SOUND = "sound"


#: Banner without list: the notification is shown but not kept in the
#: notification center, so it cannot be tapped (and tracked) a second time.
FOREGROUND_PRESENTATION: tuple[PresentationOption, ...] = (
    PresentationOption.BANNER,
    PresentationOption.SOUND,
)

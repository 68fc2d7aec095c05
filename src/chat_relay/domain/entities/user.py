from __future__ import annotations

from dataclasses import dataclass

from chat_relay.domain.value_objects.ids import UserId


@dataclass(frozen=True, slots=True)
class UserProfile:
    """Directory entry for a user seen by the service."""

    id: UserId
    display_name: str
    email: str | None = None

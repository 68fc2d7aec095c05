from __future__ import annotations

from typing import Protocol

from chat_relay.domain.entities.user import UserProfile
from chat_relay.domain.value_objects.ids import UserId


class UserReader(Protocol):
    async def get_by_id(self, user_id: UserId) -> UserProfile | None: ...

    async def get_by_email(self, email: str) -> UserProfile | None: ...

    async def get_many(self, user_ids: list[UserId]) -> list[UserProfile]: ...


class UserWriter(Protocol):
    async def upsert(self, profile: UserProfile) -> None: ...

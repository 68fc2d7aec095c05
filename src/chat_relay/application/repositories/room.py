from __future__ import annotations

from typing import Protocol

from chat_relay.domain.entities.room import Room
from chat_relay.domain.value_objects.ids import RoomId, UserId


class RoomReader(Protocol):
    async def get_by_id(self, room_id: RoomId) -> Room | None: ...

    async def get_by_join_code(self, join_code: str) -> Room | None:
        """Lookup by an already-normalized (uppercase) join code."""
        ...

    async def is_member(self, room_id: RoomId, user_id: UserId) -> bool: ...

    async def list_for_user(self, user_id: UserId) -> list[Room]:
        """Rooms the user belongs to, newest first."""
        ...


class RoomWriter(Protocol):
    async def create(self, room: Room) -> Room:
        """Insert the room and its creator membership.

        Raises ConflictError if the join code is already taken.
        """
        ...

    async def add_member(self, room_id: RoomId, user_id: UserId) -> None:
        """Idempotent: adding an existing member is a no-op."""
        ...

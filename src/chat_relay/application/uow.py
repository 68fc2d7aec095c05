from __future__ import annotations

from typing import Protocol

from chat_relay.application.repositories.message import MessageReader, MessageWriter
from chat_relay.application.repositories.room import RoomReader, RoomWriter
from chat_relay.application.repositories.user import UserReader, UserWriter


class UnitOfWork(Protocol):
    rooms: RoomReader
    rooms_w: RoomWriter
    messages: MessageReader
    messages_w: MessageWriter
    users: UserReader
    users_w: UserWriter

    async def commit(self) -> None: ...
    async def rollback(self) -> None: ...
    async def flush(self) -> None: ...

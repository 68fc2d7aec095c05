from __future__ import annotations

from typing import Protocol

from chat_relay.application.dto.message import NewMessageDTO
from chat_relay.domain.entities.message import Message
from chat_relay.domain.value_objects.destination import Destination
from chat_relay.domain.value_objects.ids import ConversationId, UserId


class MessageReader(Protocol):
    async def list_messages(
        self,
        destination: Destination,
        *,
        limit: int = 100,
    ) -> list[Message]:
        """Latest ``limit`` messages, ordered oldest to newest."""
        ...

    async def list_conversation_ids_for_user(
        self, user_id: UserId
    ) -> list[ConversationId]: ...


class MessageWriter(Protocol):
    async def append(self, new_message: NewMessageDTO) -> Message:
        """Insert a message; storage assigns id and created_at."""
        ...

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from chat_relay.domain.entities.message import Message
from chat_relay.domain.value_objects.destination import ConversationDestination, RoomDestination


class MessageResponse(BaseModel):
    id: UUID
    sender_id: str
    sender_name: str
    content: str
    room_id: UUID | None = None
    conversation_id: str | None = None
    recipient_id: str | None = None
    created_at: datetime

    @classmethod
    def from_entity(cls, message: Message) -> MessageResponse:
        room_id = None
        conversation_id = None
        match message.destination:
            case RoomDestination():
                room_id = message.destination.room_id
            case ConversationDestination():
                conversation_id = message.destination.conversation_id
        return cls(
            id=message.id,
            sender_id=message.sender_id,
            sender_name=message.sender_name,
            content=message.content,
            room_id=room_id,
            conversation_id=conversation_id,
            recipient_id=message.recipient_id,
            created_at=message.created_at,
        )

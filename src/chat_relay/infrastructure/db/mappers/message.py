from __future__ import annotations

from chat_relay.application.dto.message import NewMessageDTO
from chat_relay.domain.entities.message import Message
from chat_relay.domain.value_objects.destination import (
    ConversationDestination,
    Destination,
    RoomDestination,
)
from chat_relay.domain.value_objects.ids import ConversationId, MessageId, RoomId, UserId
from chat_relay.infrastructure.db.models.message import MessageModel


def destination_of(model: MessageModel) -> Destination:
    if model.room_id is not None:
        return RoomDestination(RoomId(model.room_id))
    return ConversationDestination(ConversationId(model.conversation_id))  # type: ignore[arg-type]


def model_to_entity(model: MessageModel) -> Message:
    return Message(
        id=MessageId(model.id),
        sender_id=UserId(model.sender_id),
        sender_name=model.sender_name,
        content=model.content,
        destination=destination_of(model),
        created_at=model.created_at,
        recipient_id=UserId(model.recipient_id) if model.recipient_id else None,
    )


def new_message_values(dto: NewMessageDTO) -> dict[str, object]:
    """Column values for an INSERT; id and created_at are left to defaults."""
    values: dict[str, object] = {
        "sender_id": dto.sender_id,
        "sender_name": dto.sender_name,
        "content": dto.content,
        "recipient_id": dto.recipient_id,
        "room_id": None,
        "conversation_id": None,
    }
    match dto.destination:
        case RoomDestination(room_id=room_id):
            values["room_id"] = room_id
        case ConversationDestination(conversation_id=conversation_id):
            values["conversation_id"] = conversation_id
    return values

"""Live connection frames (JSON over WebSocket)."""
from __future__ import annotations

from datetime import datetime
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from chat_relay.domain.entities.message import Message
from chat_relay.domain.value_objects.destination import ConversationDestination, RoomDestination


class _Frame(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True)


# Client -> Server


class SwitchChatFrame(_Frame):
    type: Literal["switch_chat"]
    room: str | None = None
    conversation_id: str | None = Field(None, alias="conversationId")


class MessageFrame(_Frame):
    type: Literal["message"]
    content: str | None = None
    recipient_id: str | None = Field(None, alias="recipientId")


class PingFrame(_Frame):
    type: Literal["ping"]


InboundFrame = Annotated[
    SwitchChatFrame | MessageFrame | PingFrame,
    Field(discriminator="type"),
]

_inbound_adapter: TypeAdapter[InboundFrame] = TypeAdapter(InboundFrame)


def parse_inbound(raw: str | bytes) -> SwitchChatFrame | MessageFrame | PingFrame:
    """Raises pydantic.ValidationError on malformed JSON or unknown frame types."""
    return _inbound_adapter.validate_json(raw)


# Server -> Client


class MessageEvent(_Frame):
    type: Literal["message"] = "message"
    message_id: str = Field(alias="messageId")
    sender: str
    sender_id: str = Field(alias="senderId")
    content: str
    room: str | None = None
    conversation_id: str | None = Field(None, alias="conversationId")
    timestamp: datetime

    @classmethod
    def from_message(cls, message: Message) -> MessageEvent:
        room: str | None = None
        conversation_id: str | None = None
        match message.destination:
            case RoomDestination(room_id=room_id):
                room = str(room_id)
            case ConversationDestination(conversation_id=cid):
                conversation_id = cid
        return cls(
            message_id=str(message.id),
            sender=message.sender_name,
            sender_id=message.sender_id,
            content=message.content,
            room=room,
            conversation_id=conversation_id,
            timestamp=message.created_at,
        )


class ErrorEvent(_Frame):
    type: Literal["error"] = "error"
    content: str


class PongEvent(_Frame):
    type: Literal["pong"] = "pong"


OutboundEvent = MessageEvent | ErrorEvent | PongEvent

from __future__ import annotations

from pydantic import BaseModel

from chat_relay.api.v1.schemas.conversation import ConversationResponse
from chat_relay.api.v1.schemas.room import RoomResponse


class ChatListResponse(BaseModel):
    rooms: list[RoomResponse]
    conversations: list[ConversationResponse]

from __future__ import annotations

from fastapi import APIRouter

from chat_relay.api.deps import CurrentPrincipal, UoWDep
from chat_relay.api.v1.schemas.chat import ChatListResponse
from chat_relay.api.v1.schemas.conversation import ConversationResponse
from chat_relay.api.v1.schemas.room import RoomResponse
from chat_relay.services import conversation_service, room_service

router = APIRouter(prefix="/api/v1/chat", tags=["chats"])


@router.get("/list", response_model=ChatListResponse)
async def chat_list(
    principal: CurrentPrincipal,
    uow: UoWDep,
) -> ChatListResponse:
    """Everything the caller can open: joined rooms and past conversations."""
    rooms = await room_service.list_user_rooms(principal, uow)
    conversations = await conversation_service.list_user_conversations(principal, uow)
    return ChatListResponse(
        rooms=[RoomResponse.model_validate(r, from_attributes=True) for r in rooms],
        conversations=[
            ConversationResponse.model_validate(c, from_attributes=True) for c in conversations
        ],
    )

from __future__ import annotations

from fastapi import APIRouter, Query

from chat_relay.api.deps import CurrentPrincipal, UoWDep
from chat_relay.api.v1.schemas.conversation import (
    ConversationResponse,
    StartConversationRequest,
)
from chat_relay.api.v1.schemas.message import MessageResponse
from chat_relay.config import settings
from chat_relay.domain.value_objects.destination import destination_from_fields
from chat_relay.services import conversation_service, message_service

router = APIRouter(prefix="/api/v1/chat/conversations", tags=["conversations"])


@router.post("", response_model=ConversationResponse)
async def start_conversation(
    body: StartConversationRequest,
    principal: CurrentPrincipal,
    uow: UoWDep,
) -> ConversationResponse:
    conversation = await conversation_service.start_conversation(
        principal,
        uow,
        recipient_id=body.recipient_id,
        recipient_email=body.recipient_email,
    )
    return ConversationResponse.model_validate(conversation, from_attributes=True)


@router.get("", response_model=list[ConversationResponse])
async def list_conversations(
    principal: CurrentPrincipal,
    uow: UoWDep,
) -> list[ConversationResponse]:
    conversations = await conversation_service.list_user_conversations(principal, uow)
    return [ConversationResponse.model_validate(c, from_attributes=True) for c in conversations]


@router.get("/{conversation_id}/messages", response_model=list[MessageResponse])
async def list_messages(
    conversation_id: str,
    principal: CurrentPrincipal,
    uow: UoWDep,
    limit: int = Query(settings.HISTORY_DEFAULT_LIMIT, ge=1, le=settings.HISTORY_MAX_LIMIT),
) -> list[MessageResponse]:
    destination = destination_from_fields(None, conversation_id)
    messages = await message_service.list_messages(destination, principal, limit, uow)
    return [MessageResponse.from_entity(m) for m in messages]

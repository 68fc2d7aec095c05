from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Query

from chat_relay.api.deps import CurrentPrincipal, UoWDep
from chat_relay.api.v1.schemas.message import MessageResponse
from chat_relay.api.v1.schemas.room import CreateRoomRequest, JoinRoomRequest, RoomResponse
from chat_relay.config import settings
from chat_relay.domain.value_objects.destination import RoomDestination
from chat_relay.domain.value_objects.ids import RoomId
from chat_relay.services import message_service, room_service

router = APIRouter(prefix="/api/v1/chat/rooms", tags=["rooms"])


@router.post("", response_model=RoomResponse, status_code=201)
async def create_room(
    body: CreateRoomRequest,
    principal: CurrentPrincipal,
    uow: UoWDep,
) -> RoomResponse:
    room = await room_service.create_room(body.name, principal, uow)
    return RoomResponse.model_validate(room, from_attributes=True)


@router.post("/join", response_model=RoomResponse)
async def join_room(
    body: JoinRoomRequest,
    principal: CurrentPrincipal,
    uow: UoWDep,
) -> RoomResponse:
    room = await room_service.join_room(body.join_code, principal, uow)
    return RoomResponse.model_validate(room, from_attributes=True)


@router.get("", response_model=list[RoomResponse])
async def list_rooms(
    principal: CurrentPrincipal,
    uow: UoWDep,
) -> list[RoomResponse]:
    rooms = await room_service.list_user_rooms(principal, uow)
    return [RoomResponse.model_validate(r, from_attributes=True) for r in rooms]


@router.get("/{room_id}/messages", response_model=list[MessageResponse])
async def list_messages(
    room_id: UUID,
    principal: CurrentPrincipal,
    uow: UoWDep,
    limit: int = Query(settings.HISTORY_DEFAULT_LIMIT, ge=1, le=settings.HISTORY_MAX_LIMIT),
) -> list[MessageResponse]:
    messages = await message_service.list_messages(
        RoomDestination(RoomId(room_id)), principal, limit, uow,
    )
    return [MessageResponse.from_entity(m) for m in messages]

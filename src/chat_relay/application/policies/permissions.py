from __future__ import annotations

from chat_relay.application.dto.principal import Principal
from chat_relay.application.exceptions import ForbiddenError, NotFoundError, ValidationError
from chat_relay.application.repositories.room import RoomReader
from chat_relay.domain.entities.room import Room
from chat_relay.domain.value_objects.conversation_id import other_participant
from chat_relay.domain.value_objects.destination import (
    ConversationDestination,
    Destination,
    RoomDestination,
)


async def assert_room_access(
    principal: Principal,
    room: Room | None,
    rooms: RoomReader,
) -> Room:
    """Raise if the room doesn't exist or principal is not a member."""
    if room is None:
        raise NotFoundError("Room not found")

    is_member = await rooms.is_member(room.id, principal.user_id)
    if not is_member:
        raise ForbiddenError("Not a member of this room")

    return room


def assert_conversation_access(
    principal: Principal,
    destination: ConversationDestination,
) -> None:
    try:
        other_participant(destination.conversation_id, principal.user_id)
    except ValidationError as exc:
        raise ForbiddenError("Not a participant of this conversation") from exc


async def assert_destination_access(
    principal: Principal,
    destination: Destination,
    rooms: RoomReader,
) -> None:
    match destination:
        case RoomDestination(room_id=room_id):
            room = await rooms.get_by_id(room_id)
            await assert_room_access(principal, room, rooms)
        case ConversationDestination():
            assert_conversation_access(principal, destination)

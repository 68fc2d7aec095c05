from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone

from chat_relay.application.dto.principal import Principal
from chat_relay.application.exceptions import ConflictError, NotFoundError, ValidationError
from chat_relay.application.uow import UnitOfWork
from chat_relay.config import settings
from chat_relay.domain.entities.room import Room
from chat_relay.domain.value_objects.ids import RoomId
from chat_relay.domain.value_objects.join_code import generate_join_code, normalize_join_code

logger = logging.getLogger(__name__)


async def create_room(
    name: str,
    principal: Principal,
    uow: UnitOfWork,
) -> Room:
    """Create a room owned by the caller with a fresh unique join code.

    Join codes are random; on a collision a new code is drawn, up to
    JOIN_CODE_MAX_ATTEMPTS times.
    """
    name = name.strip()
    if not name:
        raise ValidationError("Room name is required")
    if len(name) > settings.ROOM_NAME_MAX_LENGTH:
        raise ValidationError(
            f"Room name must be at most {settings.ROOM_NAME_MAX_LENGTH} characters"
        )

    for attempt in range(1, settings.JOIN_CODE_MAX_ATTEMPTS + 1):
        join_code = generate_join_code(settings.JOIN_CODE_LENGTH)
        if await uow.rooms.get_by_join_code(join_code) is not None:
            logger.warning("Join code collision on attempt %d", attempt)
            continue

        room = Room(
            id=RoomId(uuid.uuid4()),
            name=name,
            join_code=join_code,
            creator_id=principal.user_id,
            created_at=datetime.now(timezone.utc),
            member_ids=frozenset({principal.user_id}),
        )
        try:
            room = await uow.rooms_w.create(room)
        except ConflictError:
            logger.warning("Join code collision on insert, attempt %d", attempt)
            continue

        await uow.commit()
        logger.info("Room %s created by %s", room.id, principal.user_id)
        return room

    raise ConflictError("Could not allocate a unique join code, try again")


async def join_room(
    join_code: str,
    principal: Principal,
    uow: UnitOfWork,
) -> Room:
    code = normalize_join_code(join_code)
    room = await uow.rooms.get_by_join_code(code)
    if room is None:
        raise NotFoundError("Room not found")

    if not room.has_member(principal.user_id):
        await uow.rooms_w.add_member(room.id, principal.user_id)
        await uow.commit()
        room = await uow.rooms.get_by_id(room.id)  # type: ignore[assignment]
    return room


async def list_user_rooms(
    principal: Principal,
    uow: UnitOfWork,
) -> list[Room]:
    return await uow.rooms.list_for_user(principal.user_id)

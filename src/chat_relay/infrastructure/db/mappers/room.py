from __future__ import annotations

from chat_relay.domain.entities.room import Room
from chat_relay.domain.value_objects.ids import RoomId, UserId
from chat_relay.infrastructure.db.models.room import RoomMemberModel, RoomModel


def model_to_entity(model: RoomModel) -> Room:
    return Room(
        id=RoomId(model.id),
        name=model.name,
        join_code=model.join_code,
        creator_id=UserId(model.creator_id),
        created_at=model.created_at,
        member_ids=frozenset(UserId(m.user_id) for m in model.members),
    )


def entity_to_model(entity: Room) -> RoomModel:
    return RoomModel(
        id=entity.id,
        name=entity.name,
        join_code=entity.join_code,
        creator_id=entity.creator_id,
        created_at=entity.created_at,
        members=[RoomMemberModel(user_id=uid) for uid in sorted(entity.member_ids)],
    )

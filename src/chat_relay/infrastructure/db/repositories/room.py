from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from chat_relay.application.exceptions import ConflictError
from chat_relay.domain.entities.room import Room
from chat_relay.domain.value_objects.ids import RoomId, UserId
from chat_relay.infrastructure.db.mappers import room as mapper
from chat_relay.infrastructure.db.models.room import RoomMemberModel, RoomModel


class RoomReaderRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_id(self, room_id: RoomId) -> Room | None:
        stmt = (
            select(RoomModel)
            .where(RoomModel.id == room_id)
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return mapper.model_to_entity(model) if model else None

    async def get_by_join_code(self, join_code: str) -> Room | None:
        stmt = (
            select(RoomModel)
            .where(RoomModel.join_code == join_code)
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return mapper.model_to_entity(model) if model else None

    async def is_member(self, room_id: RoomId, user_id: UserId) -> bool:
        stmt = (
            select(RoomMemberModel.id)
            .where(
                RoomMemberModel.room_id == room_id,
                RoomMemberModel.user_id == user_id,
            )
            .limit(1)
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def list_for_user(self, user_id: UserId) -> list[Room]:
        stmt = (
            select(RoomModel)
            .join(RoomMemberModel, RoomMemberModel.room_id == RoomModel.id)
            .where(RoomMemberModel.user_id == user_id)
            .order_by(RoomModel.created_at.desc(), RoomModel.id)
        )
        result = await self._session.execute(stmt)
        return [mapper.model_to_entity(m) for m in result.scalars().all()]


class RoomWriterRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, room: Room) -> Room:
        model = mapper.entity_to_model(room)
        try:
            # SAVEPOINT so a join code clash leaves the outer transaction usable
            async with self._session.begin_nested():
                self._session.add(model)
        except IntegrityError as exc:
            if "uq_room_join_code" in str(exc.orig):
                raise ConflictError("Join code already in use") from exc
            raise
        return mapper.model_to_entity(model)

    async def add_member(self, room_id: RoomId, user_id: UserId) -> None:
        stmt = (
            pg_insert(RoomMemberModel)
            .values(room_id=room_id, user_id=user_id)
            .on_conflict_do_nothing(constraint="uq_room_member")
        )
        await self._session.execute(stmt)

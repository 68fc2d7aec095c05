from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from chat_relay.domain.entities.user import UserProfile
from chat_relay.domain.value_objects.ids import UserId
from chat_relay.infrastructure.db.mappers import user as mapper
from chat_relay.infrastructure.db.models.user import UserModel


class UserReaderRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_id(self, user_id: UserId) -> UserProfile | None:
        model = await self._session.get(UserModel, user_id)
        return mapper.model_to_entity(model) if model else None

    async def get_by_email(self, email: str) -> UserProfile | None:
        stmt = select(UserModel).where(func.lower(UserModel.email) == email.lower())
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return mapper.model_to_entity(model) if model else None

    async def get_many(self, user_ids: list[UserId]) -> list[UserProfile]:
        if not user_ids:
            return []
        stmt = select(UserModel).where(UserModel.id.in_(user_ids))
        result = await self._session.execute(stmt)
        return [mapper.model_to_entity(m) for m in result.scalars().all()]


class UserWriterRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def upsert(self, profile: UserProfile) -> None:
        stmt = pg_insert(UserModel).values(
            id=profile.id,
            display_name=profile.display_name,
            email=profile.email,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[UserModel.id],
            set_={
                "display_name": stmt.excluded.display_name,
                "email": func.coalesce(stmt.excluded.email, UserModel.email),
                "updated_at": func.now(),
            },
        )
        await self._session.execute(stmt)

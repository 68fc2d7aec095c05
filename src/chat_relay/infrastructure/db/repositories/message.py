from __future__ import annotations

import uuid

from sqlalchemy import func, or_, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from chat_relay.application.dto.message import NewMessageDTO
from chat_relay.domain.entities.message import Message
from chat_relay.domain.value_objects.destination import (
    ConversationDestination,
    Destination,
    RoomDestination,
)
from chat_relay.domain.value_objects.ids import ConversationId, UserId
from chat_relay.infrastructure.db.mappers import message as mapper
from chat_relay.infrastructure.db.models.message import MessageModel


def _destination_clause(destination: Destination):
    match destination:
        case RoomDestination(room_id=room_id):
            return MessageModel.room_id == room_id
        case ConversationDestination(conversation_id=conversation_id):
            return MessageModel.conversation_id == conversation_id


class MessageReaderRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_messages(
        self,
        destination: Destination,
        *,
        limit: int = 100,
    ) -> list[Message]:
        stmt = (
            select(MessageModel)
            .where(_destination_clause(destination))
            .order_by(MessageModel.created_at.desc(), MessageModel.id.desc())
            .limit(limit)
        )
        result = await self._session.execute(stmt)
        rows = result.scalars().all()
        # Fetched newest-first to apply the limit; callers expect newest-last
        return [mapper.model_to_entity(m) for m in reversed(rows)]

    async def list_conversation_ids_for_user(
        self, user_id: UserId
    ) -> list[ConversationId]:
        last_at = func.max(MessageModel.created_at)
        stmt = (
            select(MessageModel.conversation_id, last_at)
            .where(
                MessageModel.conversation_id.is_not(None),
                or_(
                    MessageModel.sender_id == user_id,
                    MessageModel.recipient_id == user_id,
                ),
            )
            .group_by(MessageModel.conversation_id)
            .order_by(last_at.desc())
        )
        result = await self._session.execute(stmt)
        return [ConversationId(cid) for cid, _ in result.all()]


class MessageWriterRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def append(self, new_message: NewMessageDTO) -> Message:
        stmt = (
            pg_insert(MessageModel)
            .values(id=uuid.uuid4(), **mapper.new_message_values(new_message))
            .returning(MessageModel)
        )
        result = await self._session.execute(stmt)
        return mapper.model_to_entity(result.scalar_one())

"""Relay-facing adapter over the SQL store."""
from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from chat_relay.application.dto.message import NewMessageDTO
from chat_relay.application.dto.principal import Principal
from chat_relay.application.exceptions import TransientPersistenceError
from chat_relay.application.policies.permissions import assert_destination_access
from chat_relay.domain.entities.message import Message
from chat_relay.domain.value_objects.destination import Destination
from chat_relay.infrastructure.db.uow import SqlAlchemyUoW
from chat_relay.services import message_service, user_service

logger = logging.getLogger(__name__)

_STORAGE_ERRORS = (SQLAlchemyError, OSError)


class SqlAlchemyDestinationDirectory:
    """Implements application.ports.directory.DestinationDirectory.

    Every call runs in its own session so no database work is shared
    between live connections.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def authorize(self, principal: Principal, destination: Destination) -> None:
        try:
            async with self._session_factory() as session:
                uow = SqlAlchemyUoW(session)
                await assert_destination_access(principal, destination, uow.rooms)
        except _STORAGE_ERRORS as exc:
            logger.warning("Membership lookup failed for %s", destination.key, exc_info=True)
            raise TransientPersistenceError("Chat could not be opened, please retry") from exc

    async def append_message(self, new_message: NewMessageDTO) -> Message:
        try:
            async with self._session_factory() as session, SqlAlchemyUoW(session) as uow:
                return await message_service.append_message(new_message, uow)
        except _STORAGE_ERRORS as exc:
            logger.warning(
                "Failed to persist message to %s", new_message.destination.key, exc_info=True,
            )
            raise TransientPersistenceError("Message could not be saved, please retry") from exc

    async def remember_user(self, principal: Principal) -> None:
        try:
            async with self._session_factory() as session, SqlAlchemyUoW(session) as uow:
                await user_service.remember(principal, uow)
        except _STORAGE_ERRORS as exc:
            raise TransientPersistenceError("User directory unavailable") from exc

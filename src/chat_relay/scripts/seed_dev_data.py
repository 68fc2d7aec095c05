"""Seed development data: two users, a shared room and a direct conversation."""
from __future__ import annotations

import asyncio
import logging

from chat_relay.application.dto.message import NewMessageDTO
from chat_relay.application.dto.principal import Principal
from chat_relay.domain.value_objects.conversation_id import derive_conversation_id
from chat_relay.domain.value_objects.destination import ConversationDestination, RoomDestination
from chat_relay.domain.value_objects.ids import UserId
from chat_relay.infrastructure.db.session import AsyncSessionLocal
from chat_relay.infrastructure.db.uow import SqlAlchemyUoW
from chat_relay.logging_config import configure_logging
from chat_relay.services import room_service, user_service

logger = logging.getLogger(__name__)

ALICE = Principal(user_id=UserId("u1"), display_name="alice", email="alice@example.com")
BOB = Principal(user_id=UserId("u2"), display_name="bob", email="bob@example.com")


async def seed() -> None:
    async with AsyncSessionLocal() as session:
        uow = SqlAlchemyUoW(session)
        await user_service.remember(ALICE, uow)
        await user_service.remember(BOB, uow)

        room = await room_service.create_room("Team", ALICE, uow)
        await room_service.join_room(room.join_code.lower(), BOB, uow)

        dm = ConversationDestination(derive_conversation_id(ALICE.user_id, BOB.user_id))
        messages_data = [
            (ALICE, RoomDestination(room.id), None, "Welcome to the team room!"),
            (BOB, RoomDestination(room.id), None, "Thanks, glad to be here."),
            (ALICE, dm, BOB.user_id, "Hey Bob, got a minute?"),
            (BOB, dm, ALICE.user_id, "Sure, what's up?"),
        ]
        for sender, destination, recipient_id, content in messages_data:
            await uow.messages_w.append(
                NewMessageDTO(
                    destination=destination,
                    sender_id=sender.user_id,
                    sender_name=sender.display_name,
                    content=content,
                    recipient_id=recipient_id,
                )
            )

        await uow.commit()
        logger.info(
            "Seeded room %s (join code %s) and conversation %s",
            room.id,
            room.join_code,
            dm.conversation_id,
        )


def main() -> None:
    configure_logging()
    asyncio.run(seed())


if __name__ == "__main__":
    main()

"""Persist-then-broadcast handling of inbound chat messages."""
from __future__ import annotations

import logging

from chat_relay.application.dto.message import NewMessageDTO
from chat_relay.application.exceptions import TransientPersistenceError, ValidationError
from chat_relay.application.ports.directory import DestinationDirectory
from chat_relay.domain.entities.message import Message
from chat_relay.domain.value_objects.conversation_id import other_participant
from chat_relay.domain.value_objects.destination import ConversationDestination, Destination
from chat_relay.domain.value_objects.ids import UserId
from chat_relay.realtime.protocol import ErrorEvent, MessageEvent, MessageFrame
from chat_relay.realtime.registry import SessionRegistry
from chat_relay.realtime.session import Session
from chat_relay.services.message_service import clean_content

logger = logging.getLogger(__name__)


class MessageRelay:
    def __init__(self, registry: SessionRegistry, directory: DestinationDirectory) -> None:
        self._registry = registry
        self._directory = directory

    async def handle_inbound(self, session: Session, frame: MessageFrame) -> Message | None:
        """Persist a message from ``session`` and fan it out to its destination.

        Blank content or a session without a destination is dropped
        silently. Returns the stored message, or None when nothing was
        stored.
        """
        destination = session.destination
        if not (frame.content or "").strip() or destination is None:
            logger.debug("Dropping empty or unaddressed message from session %s", session.id)
            return None

        content = clean_content(frame.content)
        recipient_id = self._resolve_recipient(session, destination, frame.recipient_id)

        try:
            message = await self._directory.append_message(
                NewMessageDTO(
                    destination=destination,
                    sender_id=session.user_id,
                    sender_name=session.display_name,
                    content=content,
                    recipient_id=recipient_id,
                )
            )
        except TransientPersistenceError as exc:
            await session.send(ErrorEvent(content=exc.detail))
            return None

        await self.broadcast(message, exclude=session)
        return message

    async def broadcast(self, message: Message, *, exclude: Session) -> int:
        """Send ``message`` to every subscriber of its destination but ``exclude``.

        The sender renders its own message locally, so it never gets an
        echo. Returns the number of sessions the frame reached.
        """
        event = MessageEvent.from_message(message)
        delivered = 0
        for recipient in self._registry.subscribers_excluding(message.destination, exclude):
            if await recipient.send(event):
                delivered += 1
        logger.debug(
            "Message %s delivered to %d session(s) on %s",
            message.id,
            delivered,
            message.destination.key,
        )
        return delivered

    @staticmethod
    def _resolve_recipient(
        session: Session,
        destination: Destination,
        supplied: str | None,
    ) -> UserId | None:
        if not isinstance(destination, ConversationDestination):
            return None
        recipient = other_participant(destination.conversation_id, session.user_id)
        if supplied and supplied != recipient:
            raise ValidationError("Recipient does not match the current conversation")
        return recipient

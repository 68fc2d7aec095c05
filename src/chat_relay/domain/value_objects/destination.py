"""Chat destinations: a room or a one-to-one conversation, never both."""
from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from chat_relay.application.exceptions import ValidationError
from chat_relay.domain.value_objects.conversation_id import participants_of
from chat_relay.domain.value_objects.enums import DestinationKind
from chat_relay.domain.value_objects.ids import ConversationId, RoomId


@dataclass(frozen=True, slots=True)
class RoomDestination:
    room_id: RoomId

    kind = DestinationKind.ROOM

    @property
    def key(self) -> str:
        return f"{self.kind}:{self.room_id}"


@dataclass(frozen=True, slots=True)
class ConversationDestination:
    conversation_id: ConversationId

    kind = DestinationKind.CONVERSATION

    @property
    def key(self) -> str:
        return f"{self.kind}:{self.conversation_id}"


Destination = RoomDestination | ConversationDestination


def destination_from_fields(
    room: str | None,
    conversation_id: str | None,
) -> Destination:
    """Build a destination from wire fields; exactly one must be set."""
    if room and conversation_id:
        raise ValidationError("Specify either a room or a conversation, not both")
    if room:
        try:
            return RoomDestination(RoomId(UUID(room)))
        except ValueError as exc:
            raise ValidationError("Invalid room id") from exc
    if conversation_id:
        participants_of(conversation_id)
        return ConversationDestination(ConversationId(conversation_id))
    raise ValidationError("Either a room or a conversation is required")

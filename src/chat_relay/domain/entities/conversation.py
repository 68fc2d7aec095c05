from __future__ import annotations

from dataclasses import dataclass

from chat_relay.domain.entities.user import UserProfile
from chat_relay.domain.value_objects.ids import ConversationId


@dataclass(frozen=True, slots=True)
class ConversationSummary:
    conversation_id: ConversationId
    other_user: UserProfile

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from chat_relay.domain.value_objects.destination import Destination
from chat_relay.domain.value_objects.ids import MessageId, UserId


@dataclass(frozen=True, slots=True)
class Message:
    id: MessageId
    sender_id: UserId
    sender_name: str
    content: str
    destination: Destination
    created_at: datetime
    recipient_id: UserId | None = None

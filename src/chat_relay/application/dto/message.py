from __future__ import annotations

from dataclasses import dataclass

from chat_relay.domain.value_objects.destination import Destination
from chat_relay.domain.value_objects.ids import UserId


@dataclass(frozen=True, slots=True)
class NewMessageDTO:
    destination: Destination
    sender_id: UserId
    sender_name: str
    content: str
    recipient_id: UserId | None = None

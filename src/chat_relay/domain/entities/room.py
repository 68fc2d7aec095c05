from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from chat_relay.domain.value_objects.ids import RoomId, UserId


@dataclass(frozen=True, slots=True)
class Room:
    id: RoomId
    name: str
    join_code: str
    creator_id: UserId
    created_at: datetime
    member_ids: frozenset[UserId] = field(default_factory=frozenset)

    def has_member(self, user_id: str) -> bool:
        return user_id in self.member_ids

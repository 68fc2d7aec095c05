from __future__ import annotations

from typing import NewType
from uuid import UUID

UserId = NewType("UserId", str)
RoomId = NewType("RoomId", UUID)
ConversationId = NewType("ConversationId", str)
MessageId = NewType("MessageId", UUID)

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator


class CreateRoomRequest(BaseModel):
    name: str = Field(min_length=1)


class JoinRoomRequest(BaseModel):
    join_code: str = Field(min_length=1)


class RoomResponse(BaseModel):
    id: UUID
    name: str
    join_code: str
    creator_id: str
    member_ids: list[str]
    created_at: datetime

    model_config = {"from_attributes": True}

    @field_validator("member_ids", mode="before")
    @classmethod
    def _sorted_members(cls, value: object) -> object:
        if isinstance(value, (set, frozenset)):
            return sorted(value)
        return value

from __future__ import annotations

from pydantic import BaseModel


class StartConversationRequest(BaseModel):
    recipient_id: str | None = None
    recipient_email: str | None = None


class UserResponse(BaseModel):
    id: str
    display_name: str
    email: str | None = None

    model_config = {"from_attributes": True}


class ConversationResponse(BaseModel):
    conversation_id: str
    other_user: UserResponse

    model_config = {"from_attributes": True}

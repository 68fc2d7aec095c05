from __future__ import annotations

from chat_relay.domain.entities.user import UserProfile
from chat_relay.domain.value_objects.ids import UserId
from chat_relay.infrastructure.db.models.user import UserModel


def model_to_entity(model: UserModel) -> UserProfile:
    return UserProfile(
        id=UserId(model.id),
        display_name=model.display_name,
        email=model.email,
    )

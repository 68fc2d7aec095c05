from __future__ import annotations

from chat_relay.application.dto.principal import Principal
from chat_relay.application.uow import UnitOfWork
from chat_relay.domain.entities.user import UserProfile


async def remember(principal: Principal, uow: UnitOfWork) -> None:
    """Record the caller in the user directory so others can find them."""
    await uow.users_w.upsert(
        UserProfile(
            id=principal.user_id,
            display_name=principal.display_name,
            email=principal.email.lower() if principal.email else None,
        )
    )
    await uow.commit()

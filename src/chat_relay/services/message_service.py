from __future__ import annotations

from chat_relay.application.dto.message import NewMessageDTO
from chat_relay.application.dto.principal import Principal
from chat_relay.application.exceptions import ValidationError
from chat_relay.application.policies.permissions import assert_destination_access
from chat_relay.application.uow import UnitOfWork
from chat_relay.config import settings
from chat_relay.domain.entities.message import Message
from chat_relay.domain.value_objects.destination import Destination


def clean_content(raw: str | None) -> str:
    """Trim content and enforce the length bound.

    Raises ValidationError for blank or oversized content.
    """
    content = (raw or "").strip()
    if not content:
        raise ValidationError("Message content is empty")
    if len(content) > settings.MESSAGE_MAX_LENGTH:
        raise ValidationError(
            f"Message content exceeds {settings.MESSAGE_MAX_LENGTH} characters"
        )
    return content


async def append_message(
    new_message: NewMessageDTO,
    uow: UnitOfWork,
) -> Message:
    msg = await uow.messages_w.append(new_message)
    await uow.commit()
    return msg


async def list_messages(
    destination: Destination,
    principal: Principal,
    limit: int,
    uow: UnitOfWork,
) -> list[Message]:
    await assert_destination_access(principal, destination, uow.rooms)
    return await uow.messages.list_messages(destination, limit=limit)

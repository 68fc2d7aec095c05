from __future__ import annotations

from typing import Protocol

from chat_relay.application.dto.message import NewMessageDTO
from chat_relay.application.dto.principal import Principal
from chat_relay.domain.entities.message import Message
from chat_relay.domain.value_objects.destination import Destination


class DestinationDirectory(Protocol):
    """What the live relay needs from persistent storage."""

    async def authorize(self, principal: Principal, destination: Destination) -> None:
        """Raise NotFoundError / ForbiddenError if the principal may not subscribe."""
        ...

    async def append_message(self, new_message: NewMessageDTO) -> Message:
        """Persist a message, assigning its id and timestamp.

        Raises TransientPersistenceError when the write fails.
        """
        ...

    async def remember_user(self, principal: Principal) -> None: ...

from __future__ import annotations

import asyncio
import logging
import uuid
from dataclasses import dataclass, field
from typing import Protocol

from chat_relay.application.dto.principal import Principal
from chat_relay.domain.value_objects.destination import Destination
from chat_relay.domain.value_objects.enums import ConnectionState
from chat_relay.domain.value_objects.ids import UserId
from chat_relay.realtime.protocol import OutboundEvent

logger = logging.getLogger(__name__)


class Connection(Protocol):
    async def send_text(self, data: str) -> None: ...


@dataclass(eq=False)
class Session:
    """Runtime state of one authenticated live connection.

    ``destination`` is owned by SessionRegistry; nothing else assigns it.
    Sessions hash by identity so two connections of the same user are
    distinct subscribers.
    """

    connection: Connection
    principal: Principal
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    destination: Destination | None = None
    state: ConnectionState = ConnectionState.AUTHENTICATED
    _send_lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False)

    @property
    def user_id(self) -> UserId:
        return self.principal.user_id

    @property
    def display_name(self) -> str:
        return self.principal.display_name

    @property
    def closed(self) -> bool:
        return self.state == ConnectionState.CLOSED

    async def send(self, event: OutboundEvent) -> bool:
        """Deliver one frame; return False if the connection is gone.

        Never raises for transport failures, cleanup is left to the
        connection's own disconnect handling.
        """
        if self.closed:
            return False
        try:
            async with self._send_lock:
                await self.connection.send_text(event.to_json())
        except Exception:  # noqa: BLE001
            logger.debug("Dropping %s frame for stale session %s", event.type, self.id)
            return False
        return True

from __future__ import annotations

from enum import StrEnum


class DestinationKind(StrEnum):
    ROOM = "room"
    CONVERSATION = "conversation"


class ConnectionState(StrEnum):
    AUTHENTICATED = "authenticated"
    SUBSCRIBED = "subscribed"
    CLOSED = "closed"

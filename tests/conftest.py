"""Shared test fixtures."""
from __future__ import annotations

import json
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest

from chat_relay.application.dto.message import NewMessageDTO
from chat_relay.application.dto.principal import Principal
from chat_relay.application.exceptions import ConflictError, TransientPersistenceError
from chat_relay.application.policies.permissions import assert_destination_access
from chat_relay.domain.entities.message import Message
from chat_relay.domain.entities.room import Room
from chat_relay.domain.entities.user import UserProfile
from chat_relay.domain.value_objects.conversation_id import SEPARATOR
from chat_relay.domain.value_objects.destination import (
    ConversationDestination,
    Destination,
    RoomDestination,
)
from chat_relay.domain.value_objects.ids import ConversationId, MessageId, RoomId, UserId
from chat_relay.realtime.session import Session
from chat_relay.services import message_service, user_service


@pytest.fixture
def alice() -> Principal:
    return Principal(user_id=UserId("u1"), display_name="alice", email="alice@example.com")


@pytest.fixture
def bob() -> Principal:
    return Principal(user_id=UserId("u2"), display_name="bob", email="bob@example.com")


@pytest.fixture
def carol() -> Principal:
    return Principal(user_id=UserId("u3"), display_name="carol")


def make_room(
    *,
    name: str = "Team",
    join_code: str = "K3F9QZ",
    creator_id: str = "u1",
    members: tuple[str, ...] = ("u1",),
) -> Room:
    return Room(
        id=RoomId(uuid.uuid4()),
        name=name,
        join_code=join_code,
        creator_id=UserId(creator_id),
        created_at=datetime.now(timezone.utc),
        member_ids=frozenset(UserId(m) for m in members),
    )


@dataclass
class FakeRoomReader:
    _store: dict[RoomId, Room] = field(default_factory=dict)

    async def get_by_id(self, room_id: RoomId) -> Room | None:
        return self._store.get(room_id)

    async def get_by_join_code(self, join_code: str) -> Room | None:
        return next((r for r in self._store.values() if r.join_code == join_code), None)

    async def is_member(self, room_id: RoomId, user_id: UserId) -> bool:
        room = self._store.get(room_id)
        return room is not None and room.has_member(user_id)

    async def list_for_user(self, user_id: UserId) -> list[Room]:
        rooms = [r for r in self._store.values() if r.has_member(user_id)]
        return sorted(rooms, key=lambda r: r.created_at, reverse=True)


@dataclass
class FakeRoomWriter:
    _reader: FakeRoomReader

    async def create(self, room: Room) -> Room:
        if any(r.join_code == room.join_code for r in self._reader._store.values()):
            raise ConflictError("Join code already in use")
        self._reader._store[room.id] = room
        return room

    async def add_member(self, room_id: RoomId, user_id: UserId) -> None:
        room = self._reader._store[room_id]
        self._reader._store[room_id] = Room(
            id=room.id,
            name=room.name,
            join_code=room.join_code,
            creator_id=room.creator_id,
            created_at=room.created_at,
            member_ids=room.member_ids | {user_id},
        )


@dataclass
class FakeMessageReader:
    _messages: list[Message] = field(default_factory=list)

    async def list_messages(self, destination: Destination, *, limit: int = 100) -> list[Message]:
        matching = [m for m in self._messages if m.destination == destination]
        return matching[-limit:]

    async def list_conversation_ids_for_user(self, user_id: UserId) -> list[ConversationId]:
        seen: dict[ConversationId, None] = {}
        for m in reversed(self._messages):
            if not isinstance(m.destination, ConversationDestination):
                continue
            if user_id in (m.sender_id, m.recipient_id):
                seen.setdefault(m.destination.conversation_id, None)
        return list(seen)


@dataclass
class FakeMessageWriter:
    _reader: FakeMessageReader
    _clock: datetime = field(default_factory=lambda: datetime(2026, 1, 1, tzinfo=timezone.utc))

    async def append(self, new_message: NewMessageDTO) -> Message:
        self._clock += timedelta(seconds=1)
        msg = Message(
            id=MessageId(uuid.uuid4()),
            sender_id=new_message.sender_id,
            sender_name=new_message.sender_name,
            content=new_message.content,
            destination=new_message.destination,
            created_at=self._clock,
            recipient_id=new_message.recipient_id,
        )
        self._reader._messages.append(msg)
        return msg


@dataclass
class FakeUserReader:
    _store: dict[UserId, UserProfile] = field(default_factory=dict)

    async def get_by_id(self, user_id: UserId) -> UserProfile | None:
        return self._store.get(user_id)

    async def get_by_email(self, email: str) -> UserProfile | None:
        return next(
            (u for u in self._store.values() if u.email and u.email.lower() == email.lower()),
            None,
        )

    async def get_many(self, user_ids: list[UserId]) -> list[UserProfile]:
        return [self._store[uid] for uid in user_ids if uid in self._store]


@dataclass
class FakeUserWriter:
    _reader: FakeUserReader

    async def upsert(self, profile: UserProfile) -> None:
        existing = self._reader._store.get(profile.id)
        email = profile.email or (existing.email if existing else None)
        self._reader._store[profile.id] = UserProfile(
            id=profile.id, display_name=profile.display_name, email=email,
        )


@dataclass
class FakeUoW:
    """In-memory UoW for unit tests."""
    rooms: FakeRoomReader = field(default_factory=FakeRoomReader)
    rooms_w: FakeRoomWriter | None = None
    messages: FakeMessageReader = field(default_factory=FakeMessageReader)
    messages_w: FakeMessageWriter | None = None
    users: FakeUserReader = field(default_factory=FakeUserReader)
    users_w: FakeUserWriter | None = None
    _committed: bool = False

    def __post_init__(self) -> None:
        if self.rooms_w is None:
            self.rooms_w = FakeRoomWriter(self.rooms)
        if self.messages_w is None:
            self.messages_w = FakeMessageWriter(self.messages)
        if self.users_w is None:
            self.users_w = FakeUserWriter(self.users)

    def add_room(self, room: Room) -> Room:
        self.rooms._store[room.id] = room
        return room

    def add_user(self, principal: Principal) -> None:
        self.users._store[principal.user_id] = UserProfile(
            id=principal.user_id, display_name=principal.display_name, email=principal.email,
        )

    async def flush(self) -> None:
        pass

    async def commit(self) -> None:
        self._committed = True

    async def rollback(self) -> None:
        pass


@dataclass
class FakeDirectory:
    """In-memory DestinationDirectory backed by a FakeUoW."""
    uow: FakeUoW = field(default_factory=FakeUoW)
    fail_writes: bool = False
    append_calls: int = 0

    async def authorize(self, principal: Principal, destination: Destination) -> None:
        await assert_destination_access(principal, destination, self.uow.rooms)

    async def append_message(self, new_message: NewMessageDTO) -> Message:
        self.append_calls += 1
        if self.fail_writes:
            raise TransientPersistenceError("Message could not be saved, please retry")
        return await message_service.append_message(new_message, self.uow)

    async def remember_user(self, principal: Principal) -> None:
        await user_service.remember(principal, self.uow)

    @property
    def stored(self) -> list[Message]:
        return self.uow.messages._messages


@dataclass(eq=False)
class FakeConnection:
    frames: list[dict[str, Any]] = field(default_factory=list)
    broken: bool = False

    async def send_text(self, data: str) -> None:
        if self.broken:
            raise RuntimeError("Cannot call send once a close message has been sent")
        self.frames.append(json.loads(data))

    def of_type(self, frame_type: str) -> list[dict[str, Any]]:
        return [f for f in self.frames if f["type"] == frame_type]


def make_session(principal: Principal) -> Session:
    return Session(connection=FakeConnection(), principal=principal)


def room_destination(room: Room) -> RoomDestination:
    return RoomDestination(room.id)


def conversation_destination(a: str, b: str) -> ConversationDestination:
    first, second = sorted((a, b))
    return ConversationDestination(ConversationId(f"{first}{SEPARATOR}{second}"))

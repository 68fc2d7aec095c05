from __future__ import annotations

import pytest

from chat_relay.application.dto.message import NewMessageDTO
from chat_relay.application.exceptions import ForbiddenError, NotFoundError, ValidationError
from chat_relay.config import settings
from chat_relay.services import message_service
from tests.conftest import FakeUoW, conversation_destination, make_room, room_destination


@pytest.mark.asyncio
async def test_append_commits(alice):
    uow = FakeUoW()
    dm = conversation_destination("u1", "u2")

    msg = await message_service.append_message(
        NewMessageDTO(dm, alice.user_id, alice.display_name, "hello", "u2"), uow,
    )

    assert msg.destination == dm
    assert msg.created_at is not None
    assert uow._committed is True


@pytest.mark.asyncio
async def test_history_is_newest_last_and_limited(alice):
    uow = FakeUoW()
    room = uow.add_room(make_room())
    dest = room_destination(room)
    for i in range(5):
        await uow.messages_w.append(NewMessageDTO(dest, "u1", "alice", f"m{i}"))

    history = await message_service.list_messages(dest, alice, 3, uow)

    assert [m.content for m in history] == ["m2", "m3", "m4"]
    assert history[0].created_at < history[-1].created_at


@pytest.mark.asyncio
async def test_room_history_requires_membership(bob):
    uow = FakeUoW()
    room = uow.add_room(make_room(members=("u1",)))

    with pytest.raises(ForbiddenError):
        await message_service.list_messages(room_destination(room), bob, 10, uow)


@pytest.mark.asyncio
async def test_room_history_unknown_room(alice):
    uow = FakeUoW()
    room = make_room()

    with pytest.raises(NotFoundError):
        await message_service.list_messages(room_destination(room), alice, 10, uow)


@pytest.mark.asyncio
async def test_conversation_history_only_for_participants(carol):
    with pytest.raises(ForbiddenError):
        await message_service.list_messages(
            conversation_destination("u1", "u2"), carol, 10, FakeUoW(),
        )


def test_clean_content_trims():
    assert message_service.clean_content("  hi  ") == "hi"


@pytest.mark.parametrize("raw", [None, "", "   "])
def test_clean_content_rejects_blank(raw):
    with pytest.raises(ValidationError):
        message_service.clean_content(raw)


def test_clean_content_length_bound():
    assert message_service.clean_content("x" * settings.MESSAGE_MAX_LENGTH)
    with pytest.raises(ValidationError):
        message_service.clean_content("x" * (settings.MESSAGE_MAX_LENGTH + 1))

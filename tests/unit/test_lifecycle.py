from __future__ import annotations

import asyncio
import json

import jwt
import pytest

from chat_relay.application.exceptions import ForbiddenError
from chat_relay.domain.value_objects.enums import ConnectionState
from chat_relay.infrastructure.auth.hs256_verifier import HS256Verifier
from chat_relay.realtime.lifecycle import (
    AUTH_FAILED_CLOSE_CODE,
    INTERNAL_ERROR_CLOSE_CODE,
    ConnectionLifecycle,
)
from chat_relay.realtime.protocol import PingFrame, PongEvent, SwitchChatFrame
from chat_relay.realtime.registry import SessionRegistry
from chat_relay.realtime.relay import MessageRelay
from tests.conftest import FakeDirectory, make_room, make_session, room_destination

SECRET = "lifecycle-test-secret-0123456789abcdef"


@pytest.fixture
def registry() -> SessionRegistry:
    return SessionRegistry()


@pytest.fixture
def directory() -> FakeDirectory:
    return FakeDirectory()


@pytest.fixture
def lifecycle(registry, directory) -> ConnectionLifecycle:
    return ConnectionLifecycle(
        registry,
        MessageRelay(registry, directory),
        directory,
        HS256Verifier(SECRET),
    )


@pytest.mark.asyncio
async def test_switch_chat_subscribes(lifecycle, registry, directory, alice):
    room = directory.uow.add_room(make_room(members=("u1",)))
    session = make_session(alice)

    await lifecycle.switch_chat(session, SwitchChatFrame(type="switch_chat", room=str(room.id)))

    assert session.destination == room_destination(room)
    assert session.state is ConnectionState.SUBSCRIBED
    assert registry.subscribers_of(room_destination(room)) == {session}


@pytest.mark.asyncio
async def test_denied_switch_keeps_previous_subscription(lifecycle, registry, directory, alice):
    mine = directory.uow.add_room(make_room(members=("u1",)))
    theirs = directory.uow.add_room(make_room(join_code="OTHER1", members=("u2",)))
    session = make_session(alice)
    await lifecycle.switch_chat(session, SwitchChatFrame(type="switch_chat", room=str(mine.id)))

    with pytest.raises(ForbiddenError):
        await lifecycle.switch_chat(
            session, SwitchChatFrame(type="switch_chat", room=str(theirs.id)),
        )

    assert session.destination == room_destination(mine)


@pytest.mark.asyncio
async def test_ping_answers_pong(lifecycle, alice):
    session = make_session(alice)
    await lifecycle.dispatch(session, PingFrame(type="ping"))
    assert session.connection.frames == [{"type": "pong"}]


@pytest.mark.asyncio
async def test_close_is_idempotent(lifecycle, registry, directory, alice):
    room = directory.uow.add_room(make_room(members=("u1",)))
    session = make_session(alice)
    await lifecycle.switch_chat(session, SwitchChatFrame(type="switch_chat", room=str(room.id)))

    lifecycle.close(session)
    lifecycle.close(session)

    assert session.closed
    assert session.destination is None
    assert registry.destinations() == []
    assert await session.send(PongEvent()) is False


class ScriptedWebSocket:
    """Just enough of starlette's WebSocket for ConnectionLifecycle.run."""

    def __init__(self, incoming=(), *, fail_sends: bool = False, receive_error=None) -> None:
        self.incoming = list(incoming)
        self.fail_sends = fail_sends
        self.receive_error = receive_error
        self.sent: list[dict] = []
        self.close_codes: list[int] = []

    async def accept(self) -> None:
        pass

    async def send_text(self, data: str) -> None:
        if self.fail_sends:
            raise RuntimeError("Cannot call send once a close message has been sent")
        self.sent.append(json.loads(data))

    async def close(self, code: int = 1000, reason: str | None = None) -> None:
        if self.fail_sends:
            raise RuntimeError("Unexpected ASGI message 'websocket.close'")
        self.close_codes.append(code)

    async def receive(self) -> dict:
        if self.receive_error is not None:
            raise self.receive_error
        if self.incoming:
            return self.incoming.pop(0)
        return {"type": "websocket.disconnect", "code": 1000}


def valid_token() -> str:
    return jwt.encode({"sub": "u1", "name": "alice"}, SECRET, algorithm="HS256")


def heartbeat_tasks() -> list[asyncio.Task]:
    return [t for t in asyncio.all_tasks() if t.get_name().startswith("ws-heartbeat-")]


@pytest.mark.asyncio
async def test_run_reads_binary_and_text_frames(lifecycle):
    ws = ScriptedWebSocket([
        {"type": "websocket.receive", "bytes": b'{"type":"ping"}'},
        {"type": "websocket.receive", "bytes": b"\x00\x01"},
        {"type": "websocket.receive", "text": '{"type":"ping"}'},
    ])

    await lifecycle.run(ws, valid_token())

    assert ws.sent == [
        {"type": "pong"},
        {"type": "error", "content": "Invalid message format"},
        {"type": "pong"},
    ]
    assert ws.close_codes == []


@pytest.mark.asyncio
async def test_run_closes_socket_on_unexpected_error(lifecycle, registry):
    ws = ScriptedWebSocket(receive_error=RuntimeError("transport exploded"))

    await lifecycle.run(ws, valid_token())

    assert ws.close_codes == [INTERNAL_ERROR_CLOSE_CODE]
    assert registry.destinations() == []


@pytest.mark.asyncio
async def test_auth_failure_tolerates_departed_peer(lifecycle):
    ws = ScriptedWebSocket(fail_sends=True)

    await lifecycle.run(ws, "not-a-jwt")

    assert ws.sent == []


@pytest.mark.asyncio
async def test_auth_failure_sends_error_then_close_code(lifecycle):
    ws = ScriptedWebSocket()

    await lifecycle.run(ws, None)

    assert ws.sent == [{"type": "error", "content": "No token provided"}]
    assert ws.close_codes == [AUTH_FAILED_CLOSE_CODE]


@pytest.mark.asyncio
async def test_heartbeat_task_finished_after_run(lifecycle):
    await lifecycle.run(ScriptedWebSocket(), valid_token())

    assert heartbeat_tasks() == []


def test_sessions_begin_authenticated(alice):
    assert make_session(alice).state is ConnectionState.AUTHENTICATED
    assert [s.value for s in ConnectionState] == ["authenticated", "subscribed", "closed"]

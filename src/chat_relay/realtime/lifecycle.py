"""Live connection lifecycle: authenticate, subscribe, relay, clean up."""
from __future__ import annotations

import asyncio
import contextlib
import logging

from fastapi import WebSocket, WebSocketDisconnect
from pydantic import ValidationError as PayloadError

from chat_relay.application.exceptions import AppError, AuthenticationError
from chat_relay.application.ports.auth import TokenVerifier
from chat_relay.application.ports.directory import DestinationDirectory
from chat_relay.domain.value_objects.destination import destination_from_fields
from chat_relay.domain.value_objects.enums import ConnectionState
from chat_relay.realtime.protocol import (
    ErrorEvent,
    MessageFrame,
    PingFrame,
    PongEvent,
    SwitchChatFrame,
    parse_inbound,
)
from chat_relay.realtime.registry import SessionRegistry
from chat_relay.realtime.relay import MessageRelay
from chat_relay.realtime.session import Session

logger = logging.getLogger(__name__)

AUTH_FAILED_CLOSE_CODE = 4001
INTERNAL_ERROR_CLOSE_CODE = 1011


class ConnectionLifecycle:
    """Drives one WebSocket from accept to teardown.

    Connecting -> Authenticated -> Subscribed (any number of switches) -> Closed.
    A Session only exists from Authenticated on; the Connecting phase is the
    accept and token check in ``run``.
    """

    def __init__(
        self,
        registry: SessionRegistry,
        relay: MessageRelay,
        directory: DestinationDirectory,
        verifier: TokenVerifier,
        *,
        heartbeat_seconds: float = 30,
    ) -> None:
        self._registry = registry
        self._relay = relay
        self._directory = directory
        self._verifier = verifier
        self._heartbeat_seconds = heartbeat_seconds

    async def run(self, websocket: WebSocket, token: str | None) -> None:
        await websocket.accept()

        session = await self._authenticate(websocket, token)
        if session is None:
            return

        heartbeat_task = asyncio.create_task(
            self._heartbeat(session), name=f"ws-heartbeat-{session.id}",
        )
        try:
            await self._read_loop(websocket, session)
        except WebSocketDisconnect:
            pass
        except Exception:
            logger.exception("WS error for session %s (%s)", session.id, session.user_id)
            await _close_quietly(websocket, INTERNAL_ERROR_CLOSE_CODE, "Internal error")
        finally:
            heartbeat_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await heartbeat_task
            self.close(session)

    def close(self, session: Session) -> None:
        """Tear down a session; safe to call more than once."""
        if session.closed:
            return
        session.state = ConnectionState.CLOSED
        self._registry.on_disconnect(session)
        logger.debug("WS disconnected: session %s (%s)", session.id, session.user_id)

    async def switch_chat(self, session: Session, frame: SwitchChatFrame) -> None:
        destination = destination_from_fields(frame.room, frame.conversation_id)
        await self._directory.authorize(session.principal, destination)
        self._registry.subscribe(session, destination)
        session.state = ConnectionState.SUBSCRIBED

    async def dispatch(self, session: Session, frame: SwitchChatFrame | MessageFrame | PingFrame) -> None:
        match frame:
            case PingFrame():
                await session.send(PongEvent())
            case SwitchChatFrame():
                await self.switch_chat(session, frame)
            case MessageFrame():
                await self._relay.handle_inbound(session, frame)

    async def _authenticate(self, websocket: WebSocket, token: str | None) -> Session | None:
        try:
            if not token:
                raise AuthenticationError("No token provided")
            principal = await self._verifier.verify(token)
        except AuthenticationError as exc:
            logger.debug("WS auth failed: %s", exc.detail)
            try:
                await websocket.send_text(ErrorEvent(content=exc.detail).to_json())
            except Exception:  # noqa: BLE001
                logger.debug("WS peer left before the auth error was sent")
            await _close_quietly(websocket, AUTH_FAILED_CLOSE_CODE, exc.detail)
            return None

        session = Session(connection=websocket, principal=principal)
        logger.debug("WS connected: session %s (%s)", session.id, session.user_id)
        try:
            await self._directory.remember_user(principal)
        except AppError:
            logger.warning("Could not record user %s in the directory", principal.user_id)
        return session

    async def _read_loop(self, websocket: WebSocket, session: Session) -> None:
        while True:
            raw = await _receive_payload(websocket)
            try:
                frame = parse_inbound(raw)
            except PayloadError:
                await session.send(ErrorEvent(content="Invalid message format"))
                continue

            try:
                await self.dispatch(session, frame)
            except AppError as exc:
                await session.send(ErrorEvent(content=exc.detail))

    async def _heartbeat(self, session: Session) -> None:
        while True:
            await asyncio.sleep(self._heartbeat_seconds)
            if not await session.send(PongEvent()):
                return


async def _receive_payload(websocket: WebSocket) -> str | bytes:
    """Next text or binary frame; binary frames are parsed like text."""
    message = await websocket.receive()
    if message["type"] == "websocket.disconnect":
        raise WebSocketDisconnect(message.get("code", 1000), message.get("reason"))
    text = message.get("text")
    if text is not None:
        return text
    return message.get("bytes") or b""


async def _close_quietly(websocket: WebSocket, code: int, reason: str) -> None:
    try:
        await websocket.close(code=code, reason=reason)
    except Exception:  # noqa: BLE001
        logger.debug("WS already closed, could not send close code %d", code)

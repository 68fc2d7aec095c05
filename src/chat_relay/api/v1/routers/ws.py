from __future__ import annotations

from fastapi import APIRouter, Query, WebSocket

from chat_relay.realtime.lifecycle import ConnectionLifecycle

router = APIRouter(tags=["websocket"])


@router.websocket("/ws")
async def ws_chat(
    websocket: WebSocket,
    token: str | None = Query(None),
) -> None:
    lifecycle: ConnectionLifecycle = websocket.app.state.lifecycle
    await lifecycle.run(websocket, token)

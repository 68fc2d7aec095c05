from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from chat_relay.api.deps import get_verifier
from chat_relay.api.middleware.access_log import AccessLogMiddleware
from chat_relay.api.middleware.correlation_id import CorrelationIdMiddleware
from chat_relay.api.v1.routers import chats, conversations, health, rooms, ws
from chat_relay.application.exceptions import (
    AuthenticationError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    TransientPersistenceError,
    ValidationError,
)
from chat_relay.application.ports.directory import DestinationDirectory
from chat_relay.config import settings
from chat_relay.infrastructure.db.directory import SqlAlchemyDestinationDirectory
from chat_relay.infrastructure.db.session import AsyncSessionLocal, engine
from chat_relay.realtime.lifecycle import ConnectionLifecycle
from chat_relay.realtime.registry import SessionRegistry
from chat_relay.realtime.relay import MessageRelay

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup / shutdown lifecycle."""
    logger.info("Chat relay started")

    yield

    active = app.state.registry.destinations()
    if active:
        logger.info("Shutting down with %d active destination(s)", len(active))
    await engine.dispose()
    logger.info("Database engine disposed")


def create_app(directory: DestinationDirectory | None = None) -> FastAPI:
    app = FastAPI(
        title="Chat Relay",
        version="0.1.0",
        lifespan=lifespan,
    )

    registry = SessionRegistry()
    directory = directory or SqlAlchemyDestinationDirectory(AsyncSessionLocal)
    relay = MessageRelay(registry, directory)
    app.state.registry = registry
    app.state.relay = relay
    app.state.lifecycle = ConnectionLifecycle(
        registry,
        relay,
        directory,
        get_verifier(),
        heartbeat_seconds=settings.WS_HEARTBEAT_SECONDS,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(AccessLogMiddleware)
    app.add_middleware(CorrelationIdMiddleware)

    _register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(rooms.router)
    app.include_router(conversations.router)
    app.include_router(chats.router)
    app.include_router(ws.router)

    return app


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AuthenticationError)
    async def _unauthenticated(_req: Request, exc: AuthenticationError) -> JSONResponse:
        return JSONResponse(status_code=401, content={"detail": exc.detail})

    @app.exception_handler(NotFoundError)
    async def _not_found(_req: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": exc.detail})

    @app.exception_handler(ForbiddenError)
    async def _forbidden(_req: Request, exc: ForbiddenError) -> JSONResponse:
        return JSONResponse(status_code=403, content={"detail": exc.detail})

    @app.exception_handler(ConflictError)
    async def _conflict(_req: Request, exc: ConflictError) -> JSONResponse:
        return JSONResponse(status_code=409, content={"detail": exc.detail})

    @app.exception_handler(ValidationError)
    async def _validation(_req: Request, exc: ValidationError) -> JSONResponse:
        return JSONResponse(status_code=422, content={"detail": exc.detail})

    @app.exception_handler(TransientPersistenceError)
    async def _unavailable(_req: Request, exc: TransientPersistenceError) -> JSONResponse:
        return JSONResponse(status_code=503, content={"detail": exc.detail})

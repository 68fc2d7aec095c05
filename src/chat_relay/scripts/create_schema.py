"""Create all tables for a fresh development database."""
from __future__ import annotations

import asyncio
import logging

from chat_relay.infrastructure.db import models  # noqa: F401  registers tables
from chat_relay.infrastructure.db.base import Base
from chat_relay.infrastructure.db.session import engine
from chat_relay.logging_config import configure_logging

logger = logging.getLogger(__name__)


async def create_schema() -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    await engine.dispose()
    logger.info("Created tables: %s", ", ".join(sorted(Base.metadata.tables)))


def main() -> None:
    configure_logging()
    asyncio.run(create_schema())


if __name__ == "__main__":
    main()

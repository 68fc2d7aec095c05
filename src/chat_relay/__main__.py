"""Entrypoint: python -m chat_relay"""
from __future__ import annotations

import uvicorn

from chat_relay.config import settings
from chat_relay.logging_config import configure_logging


def main() -> None:
    configure_logging(settings.LOG_LEVEL)
    uvicorn.run(
        "chat_relay.app:create_app",
        factory=True,
        host="0.0.0.0",
        port=8000,
        log_level=settings.LOG_LEVEL.lower(),
        log_config=None,
    )


if __name__ == "__main__":
    main()

"""Root conftest: test environment must be in place before chat_relay.config is imported."""
from __future__ import annotations

import os
from pathlib import Path

_DEFAULTS = {
    "JWT_SECRET": "test-only-hs256-secret-0123456789abcdef",
    "JWT_VERIFY_MODE": "hs256",
    "WS_HEARTBEAT_SECONDS": "3600",
}


def _load_env_file(path: Path) -> None:
    for line in path.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        key, _, value = line.partition("=")
        os.environ.setdefault(key.strip(), value.strip())


_env_test = Path(__file__).resolve().parent / ".env.test"
if _env_test.exists():
    _load_env_file(_env_test)
for _key, _value in _DEFAULTS.items():
    os.environ.setdefault(_key, _value)

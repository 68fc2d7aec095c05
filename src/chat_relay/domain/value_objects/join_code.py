from __future__ import annotations

import secrets
import string

from chat_relay.application.exceptions import ValidationError

ALPHABET = string.ascii_uppercase + string.digits


def generate_join_code(length: int = 6) -> str:
    return "".join(secrets.choice(ALPHABET) for _ in range(length))


def normalize_join_code(code: str) -> str:
    """Trim and uppercase a user supplied join code."""
    normalized = code.strip().upper()
    if not normalized or any(ch not in ALPHABET for ch in normalized):
        raise ValidationError("Join code must be alphanumeric")
    return normalized

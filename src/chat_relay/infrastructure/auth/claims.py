from __future__ import annotations

from typing import Any

from chat_relay.application.dto.principal import Principal
from chat_relay.application.exceptions import AuthenticationError, ValidationError
from chat_relay.domain.value_objects.conversation_id import validate_user_id

_NAME_CLAIMS = ("name", "username", "preferred_username")


def principal_from_claims(payload: dict[str, Any]) -> Principal:
    raw_id = payload.get("sub", payload.get("userId"))
    if raw_id is None:
        raise AuthenticationError("Token has no subject")
    try:
        user_id = validate_user_id(str(raw_id))
    except ValidationError as exc:
        raise AuthenticationError(exc.detail) from exc

    display_name = next(
        (str(payload[c]) for c in _NAME_CLAIMS if payload.get(c)),
        user_id,
    )
    return Principal(
        user_id=user_id,
        display_name=display_name,
        email=payload.get("email"),
        roles=payload.get("roles", []),
    )

from __future__ import annotations

import jwt

from chat_relay.application.dto.principal import Principal
from chat_relay.application.exceptions import AuthenticationError
from chat_relay.infrastructure.auth.claims import principal_from_claims


class HS256Verifier:
    """Verify JWTs signed with a shared HS256 secret."""

    def __init__(self, secret: str, algorithm: str = "HS256") -> None:
        self._secret = secret
        self._algorithm = algorithm

    async def verify(self, token: str) -> Principal:
        if not token:
            raise AuthenticationError("No token provided")
        try:
            payload = jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except jwt.PyJWTError as exc:
            raise AuthenticationError("Invalid token") from exc
        return principal_from_claims(payload)

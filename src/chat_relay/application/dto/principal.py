from __future__ import annotations

from dataclasses import dataclass, field

from chat_relay.domain.value_objects.ids import UserId


@dataclass(frozen=True, slots=True)
class Principal:
    """Authenticated caller identity extracted from JWT."""

    user_id: UserId
    display_name: str
    email: str | None = None
    roles: list[str] = field(default_factory=list)

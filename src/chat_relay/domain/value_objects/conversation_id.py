"""Canonical identifiers for one-to-one conversations.

A conversation id is the two participant ids, sorted lexicographically and
joined with ``SEPARATOR``. User ids must never contain the separator,
otherwise the pair could not be recovered from the id.
"""
from __future__ import annotations

from chat_relay.application.exceptions import ValidationError
from chat_relay.domain.value_objects.ids import ConversationId, UserId

SEPARATOR = "_"


def validate_user_id(user_id: str) -> UserId:
    if not user_id:
        raise ValidationError("User id must not be empty")
    if SEPARATOR in user_id:
        raise ValidationError(f"User id must not contain {SEPARATOR!r}")
    return UserId(user_id)


def derive_conversation_id(user_a: str, user_b: str) -> ConversationId:
    """Return the same id for ``(a, b)`` and ``(b, a)``."""
    a = validate_user_id(user_a)
    b = validate_user_id(user_b)
    if a == b:
        raise ValidationError("Cannot start a conversation with yourself")
    first, second = sorted((a, b))
    return ConversationId(f"{first}{SEPARATOR}{second}")


def participants_of(conversation_id: str) -> tuple[UserId, UserId]:
    first, sep, second = conversation_id.partition(SEPARATOR)
    if not sep or not first or not second or SEPARATOR in second:
        raise ValidationError("Malformed conversation id")
    if first >= second:
        raise ValidationError("Conversation id is not canonical")
    return UserId(first), UserId(second)


def other_participant(conversation_id: str, known: str) -> UserId:
    """Given one participant, return the other one.

    Raises ValidationError when ``known`` is not part of the conversation.
    """
    first, second = participants_of(conversation_id)
    if known == first:
        return second
    if known == second:
        return first
    raise ValidationError("Not a participant of this conversation")

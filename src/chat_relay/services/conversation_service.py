from __future__ import annotations

from chat_relay.application.dto.principal import Principal
from chat_relay.application.exceptions import NotFoundError, ValidationError
from chat_relay.application.uow import UnitOfWork
from chat_relay.domain.entities.conversation import ConversationSummary
from chat_relay.domain.value_objects.conversation_id import (
    derive_conversation_id,
    other_participant,
)
from chat_relay.domain.value_objects.ids import UserId
from chat_relay.services import user_service


async def start_conversation(
    principal: Principal,
    uow: UnitOfWork,
    *,
    recipient_id: str | None = None,
    recipient_email: str | None = None,
) -> ConversationSummary:
    """Resolve the recipient and return the canonical conversation for the pair.

    Nothing is persisted for the conversation itself; it exists implicitly
    through its derived id.
    """
    if bool(recipient_id) == bool(recipient_email):
        raise ValidationError("Provide exactly one of recipient_id or recipient_email")

    if recipient_id:
        recipient = await uow.users.get_by_id(UserId(recipient_id))
    else:
        recipient = await uow.users.get_by_email(recipient_email.strip().lower())  # type: ignore[union-attr]
    if recipient is None:
        raise NotFoundError("User not found")

    if recipient.id == principal.user_id:
        raise ValidationError("Cannot start a conversation with yourself")

    conversation_id = derive_conversation_id(principal.user_id, recipient.id)
    await user_service.remember(principal, uow)
    return ConversationSummary(conversation_id=conversation_id, other_user=recipient)


async def list_user_conversations(
    principal: Principal,
    uow: UnitOfWork,
) -> list[ConversationSummary]:
    """Conversations the caller has exchanged messages in.

    Conversations whose other participant is unknown to the directory are
    skipped.
    """
    conversation_ids = await uow.messages.list_conversation_ids_for_user(principal.user_id)
    others = {cid: other_participant(cid, principal.user_id) for cid in conversation_ids}
    profiles = {p.id: p for p in await uow.users.get_many(list(set(others.values())))}
    return [
        ConversationSummary(conversation_id=cid, other_user=profiles[uid])
        for cid, uid in others.items()
        if uid in profiles
    ]

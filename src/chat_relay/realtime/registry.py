"""Which live sessions are subscribed to which destination."""
from __future__ import annotations

import logging
import threading
from collections.abc import Iterator

from chat_relay.domain.value_objects.destination import Destination
from chat_relay.realtime.session import Session

logger = logging.getLogger(__name__)


class SessionRegistry:
    """Maps each destination to its subscribed sessions.

    A session is in the subscriber set of ``D`` exactly when
    ``session.destination == D``. Every mutation and every fan-out snapshot
    happens under one lock, so a session moving between destinations is
    never seen half-moved. The lock is never held across an ``await``.
    """

    def __init__(self) -> None:
        self._subscribers: dict[Destination, set[Session]] = {}
        self._lock = threading.Lock()

    def subscribe(self, session: Session, destination: Destination) -> None:
        """Move ``session`` to ``destination``, leaving its previous one."""
        with self._lock:
            if session.destination == destination:
                return
            previous = self._detach(session)
            self._subscribers.setdefault(destination, set()).add(session)
            session.destination = destination
        logger.debug(
            "Session %s (%s) switched %s -> %s",
            session.id,
            session.user_id,
            previous.key if previous else None,
            destination.key,
        )

    def unsubscribe(self, session: Session) -> Destination | None:
        with self._lock:
            return self._detach(session)

    def on_disconnect(self, session: Session) -> None:
        with self._lock:
            previous = self._detach(session)
        logger.debug(
            "Session %s (%s) removed from %s",
            session.id,
            session.user_id,
            previous.key if previous else None,
        )

    def subscribers_excluding(
        self,
        destination: Destination,
        session: Session,
    ) -> Iterator[Session]:
        """Lazy, single-pass iterator over the other subscribers of ``destination``.

        The subscriber set is snapshotted now; later switches do not affect
        an iteration already handed out.
        """
        with self._lock:
            snapshot = tuple(self._subscribers.get(destination, ()))
        return (s for s in snapshot if s is not session)

    def subscribers_of(self, destination: Destination) -> frozenset[Session]:
        with self._lock:
            return frozenset(self._subscribers.get(destination, ()))

    def destinations(self) -> list[Destination]:
        with self._lock:
            return list(self._subscribers)

    def _detach(self, session: Session) -> Destination | None:
        current = session.destination
        if current is None:
            return None
        subscribers = self._subscribers.get(current)
        if subscribers is not None:
            subscribers.discard(session)
            if not subscribers:
                del self._subscribers[current]
        session.destination = None
        return current

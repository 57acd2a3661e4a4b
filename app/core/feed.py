"""
Live seat-availability feed.

Viewers of a showtime register a handler and get called whenever that
showtime's reserved seats change. A signal only says *that* something
changed: handlers must re-read the reserved seats themselves, since signals
can be coalesced, arrive out of commit order, or be lost (for instance while
an SSE client is reconnecting).

Changes are picked up from the ORM, not announced by callers: any flush that
inserts or deletes ``BookedSeat`` rows marks the showtime, and the mark is
published once the surrounding transaction commits. Rolled back work is
never published.
"""

import itertools
import logging
import threading
from dataclasses import dataclass
from typing import Callable, Dict, Set
from uuid import UUID

from sqlalchemy import event
from sqlalchemy.orm import Session

from app.models.booking import BookedSeat

logger = logging.getLogger(__name__)

SeatChangeHandler = Callable[[UUID], None]

_PENDING_KEY = "seat_feed_pending"


@dataclass(frozen=True)
class Subscription:
    token: int
    showtime_id: UUID


class AvailabilityFeed:
    def __init__(self):
        self._handlers: Dict[int, tuple[UUID, SeatChangeHandler]] = {}
        self._tokens = itertools.count(1)
        self._lock = threading.Lock()

    def register(self, showtime_id: UUID, handler: SeatChangeHandler) -> Subscription:
        with self._lock:
            token = next(self._tokens)
            self._handlers[token] = (showtime_id, handler)
        logger.debug("Feed subscription %d registered for showtime %s", token, showtime_id)
        return Subscription(token=token, showtime_id=showtime_id)

    def unregister(self, subscription: Subscription) -> bool:
        with self._lock:
            removed = self._handlers.pop(subscription.token, None) is not None
        if removed:
            logger.debug("Feed subscription %d removed", subscription.token)
        return removed

    def subscriber_count(self, showtime_id: UUID) -> int:
        with self._lock:
            return sum(1 for sid, _ in self._handlers.values() if sid == showtime_id)

    def publish(self, showtime_id: UUID) -> int:
        """Call every handler registered for the showtime, one at a time. Returns how many ran cleanly."""
        with self._lock:
            handlers = [h for sid, h in self._handlers.values() if sid == showtime_id]

        delivered = 0
        for handler in handlers:
            try:
                handler(showtime_id)
                delivered += 1
            except Exception:
                # A broken viewer only goes stale; the commit already happened
                logger.exception("Seat feed handler failed for showtime %s", showtime_id)
        logger.debug(
            "Published seat change for showtime %s to %d/%d handler(s)",
            showtime_id, delivered, len(handlers),
        )
        return delivered


availability_feed = AvailabilityFeed()


@event.listens_for(Session, "after_flush")
def _collect_seat_changes(session: Session, flush_context) -> None:
    changed: Set[UUID] = {
        obj.showtime_id
        for obj in itertools.chain(session.new, session.deleted)
        if isinstance(obj, BookedSeat) and obj.showtime_id is not None
    }
    if changed:
        session.info.setdefault(_PENDING_KEY, set()).update(changed)


@event.listens_for(Session, "after_commit")
def _publish_seat_changes(session: Session) -> None:
    changed = session.info.pop(_PENDING_KEY, None)
    for showtime_id in changed or ():
        availability_feed.publish(showtime_id)


@event.listens_for(Session, "after_rollback")
def _discard_seat_changes(session: Session) -> None:
    session.info.pop(_PENDING_KEY, None)

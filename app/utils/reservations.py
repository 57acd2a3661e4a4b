import logging
from decimal import Decimal
from typing import Iterable, Optional, Set
from uuid import UUID

from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session, joinedload

from app.core.exceptions import (
    AuthenticationRequiredError,
    EmptySelectionError,
    NotFoundError,
    ReservationOutcomeUnknownError,
    SeatConflictError,
    UnknownSeatError,
)
from app.models.booking import Booking, BookedSeat
from app.models.showtime import Showtime
from app.models.user import User
from app.utils.seat_layout import resolve_layout

# Importing the feed registers the session hooks that announce committed seat changes
import app.core.feed  # noqa: F401

logger = logging.getLogger(__name__)

CONFIRMED = "confirmed"
CANCELLED = "cancelled"


def reserved_labels(
    db: Session, showtime_id: UUID, labels: Optional[Iterable[str]] = None
) -> Set[str]:
    """Seat labels currently reserved for a showtime, optionally narrowed to ``labels``."""
    query = db.query(BookedSeat.seat_label).filter(BookedSeat.showtime_id == showtime_id)
    if labels is not None:
        query = query.filter(BookedSeat.seat_label.in_(list(labels)))
    return {label for (label,) in query.all()}


def load_showtime(db: Session, showtime_id: UUID) -> Showtime:
    showtime = (
        db.query(Showtime)
        .options(joinedload(Showtime.hall), joinedload(Showtime.movie))
        .filter(Showtime.id == showtime_id)
        .first()
    )
    if not showtime:
        raise NotFoundError("Showtime not found")
    return showtime


def reserve_seats(
    db: Session,
    user: Optional[User],
    showtime_id: UUID,
    seats: Iterable[str],
) -> Booking:
    """
    Book ``seats`` for ``user`` in a single transaction.

    Creates one Booking holding the seat list and one BookedSeat per seat.
    Either everything is committed or nothing is: if the store rejects any
    BookedSeat on the (showtime_id, seat_label) unique key, the whole
    transaction is rolled back and SeatConflictError is raised. No locks are
    taken here; the unique key decides which of two racing bookings wins.

    The pre-read of reserved seats only lets us name the taken seats early.
    """
    if user is None:
        raise AuthenticationRequiredError()

    requested = {label.strip() for label in seats if label and label.strip()}
    if not requested:
        raise EmptySelectionError()

    showtime = load_showtime(db, showtime_id)
    layout = resolve_layout(showtime.hall.seat_layout)

    unknown = requested - layout.labels()
    if unknown:
        raise UnknownSeatError(unknown)

    # Store seats in hall order, not click order
    ordered = [seat.label for seat in layout if seat.label in requested]

    taken = reserved_labels(db, showtime.id, ordered)
    if taken:
        logger.info(
            "Booking rejected for user %s on showtime %s: %s already taken",
            user.id, showtime.id, ",".join(sorted(taken)),
        )
        raise SeatConflictError(taken)

    booking = Booking(
        user_id=user.id,
        showtime_id=showtime.id,
        seats=ordered,
        total_price=Decimal(showtime.ticket_price) * len(ordered),
        booking_status=CONFIRMED,
    )
    booking.booked_seats = [
        BookedSeat(showtime_id=showtime.id, seat_label=label) for label in ordered
    ]
    db.add(booking)

    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        lost = reserved_labels(db, showtime.id, ordered)
        logger.info(
            "Booking lost a seat race on showtime %s: %s",
            showtime.id, ",".join(sorted(lost)) or "unknown seat",
        )
        raise SeatConflictError(lost) from exc
    except OperationalError as exc:
        db.rollback()
        logger.error("Booking commit failed on showtime %s: %s", showtime.id, exc)
        raise ReservationOutcomeUnknownError() from exc

    db.refresh(booking)
    logger.info(
        "Booking %s confirmed for user %s: showtime %s seats %s total %s",
        booking.id, user.id, showtime.id, ",".join(ordered), booking.total_price,
    )
    return booking


def cancel_booking(db: Session, booking: Booking) -> Booking:
    """
    Administrative cancellation: mark the booking cancelled and free its seats.

    The booking keeps no live seats afterwards; the labels it held move to
    ``released_seats`` so the history survives.
    """
    if booking.booking_status == CANCELLED:
        return booking

    released = list(booking.seats)
    booking.booking_status = CANCELLED
    booking.released_seats = released
    booking.seats = []
    for record in list(booking.booked_seats):
        db.delete(record)
    db.commit()
    db.refresh(booking)
    logger.info("Booking %s cancelled, seats %s released", booking.id, ",".join(released))
    return booking

from uuid import UUID
from typing import Optional, Type

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session, joinedload

from app.db.session import get_db
from app.core.exceptions import NotFoundError
from app.api.deps import get_current_user
from app.models.user import User
from app.models.booking import Booking
from app.models.showtime import Showtime
from app.schemas.booking import (
    AdminBooking,
    BookingCreate,
    Booking as BookingSchema,
    BookingShowtimeSummary,
)
from app.schemas.common import PaginatedResponse, SeatsUnavailableError, paginate
from app.schemas.user import UserSummary
from app.utils.reservations import reserve_seats

router = APIRouter(prefix="/bookings", tags=["Bookings"])


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def booking_query(db: Session):
    """Bookings with showtime, movie and hall eager-loaded for serialization."""
    return db.query(Booking).options(
        joinedload(Booking.showtime).joinedload(Showtime.movie),
        joinedload(Booking.showtime).joinedload(Showtime.hall),
    )


def serialize_booking(booking: Booking, schema: Type[BookingSchema] = BookingSchema) -> BookingSchema:
    """Convert a Booking ORM object to its schema representation."""
    showtime_summary = None
    st = booking.showtime
    if st:
        showtime_summary = BookingShowtimeSummary(
            show_date=st.show_date,
            show_time=st.show_time,
            ticket_price=st.ticket_price,
            movie_title=st.movie.title if st.movie else "",
            poster_url=st.movie.poster_url if st.movie else None,
            hall_name=st.hall.name if st.hall else "",
        )

    extra = {}
    if schema is AdminBooking and booking.user:
        extra["user"] = UserSummary.model_validate(booking.user)

    return schema(
        id=booking.id,
        user_id=booking.user_id,
        showtime_id=booking.showtime_id,
        seats=list(booking.seats),
        released_seats=list(booking.released_seats or []),
        total_price=booking.total_price,
        booking_status=booking.booking_status,
        created_at=booking.created_at,
        showtime=showtime_summary,
        **extra,
    )


# ---------------------------------------------------------------------------
# POST /bookings — reserve seats
# ---------------------------------------------------------------------------


@router.post(
    "/",
    response_model=BookingSchema,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"model": SeatsUnavailableError}},
)
def create_booking(
    data: BookingCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Book the selected seats of a showtime.

    - Total = showtime ticket price × number of seats.
    - All-or-nothing: if any seat is already taken the response is 409 with
      `unavailable_seats`, and nothing is booked. Refresh the seat map and
      pick again.
    - 503 means the outcome is unknown; refresh the seat map and
      `GET /bookings` before retrying so the seats aren't booked twice.
    """
    booking = reserve_seats(db, current_user, data.showtime_id, data.seats)
    return serialize_booking(booking_query(db).filter(Booking.id == booking.id).one())


# ---------------------------------------------------------------------------
# GET /bookings — list current user's bookings
# ---------------------------------------------------------------------------


@router.get("/", response_model=PaginatedResponse[BookingSchema])
def list_my_bookings(
    booking_status: Optional[str] = Query(
        None, alias="status", description="Filter by status: confirmed, cancelled"
    ),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=50),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Return the authenticated user's bookings, newest first."""
    query = booking_query(db).filter(Booking.user_id == current_user.id)
    if booking_status:
        query = query.filter(Booking.booking_status == booking_status)

    total = query.count()
    bookings = (
        query.order_by(Booking.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )

    return PaginatedResponse(
        **paginate([serialize_booking(b) for b in bookings], total, page, limit)
    )


# ---------------------------------------------------------------------------
# GET /bookings/{id} — single booking detail
# ---------------------------------------------------------------------------


@router.get("/{booking_id}", response_model=BookingSchema)
def get_booking(
    booking_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Return a single booking. Only the owning user can access it."""
    booking = (
        booking_query(db)
        .filter(Booking.id == booking_id, Booking.user_id == current_user.id)
        .first()
    )
    if not booking:
        raise NotFoundError("Booking not found")
    return serialize_booking(booking)

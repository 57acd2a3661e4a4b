from uuid import UUID
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.core.exceptions import NotFoundError
from app.api.deps import get_current_admin_user
from app.api.v1.public.bookings import booking_query, serialize_booking
from app.models.user import User
from app.models.booking import Booking
from app.schemas.booking import AdminBooking
from app.schemas.common import PaginatedResponse, paginate
from app.utils.reservations import cancel_booking

router = APIRouter(prefix="/admin/bookings", tags=["Admin - Bookings"])


@router.get("/", response_model=PaginatedResponse[AdminBooking])
def list_all_bookings(
    showtime_id: Optional[UUID] = Query(None),
    booking_status: Optional[str] = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin_user),
):
    """Every booking, newest first, with the booking user's summary."""
    query = booking_query(db)
    if showtime_id:
        query = query.filter(Booking.showtime_id == showtime_id)
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
        **paginate([serialize_booking(b, AdminBooking) for b in bookings], total, page, limit)
    )


@router.patch("/{booking_id}/cancel", response_model=AdminBooking)
def admin_cancel_booking(
    booking_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin_user),
):
    """
    Cancel a booking and release its seats for the showtime.
    Viewers of the showtime are notified through the seat feed.
    """
    booking = db.query(Booking).filter(Booking.id == booking_id).first()
    if not booking:
        raise NotFoundError("Booking not found")

    cancel_booking(db, booking)
    return serialize_booking(
        booking_query(db).filter(Booking.id == booking_id).one(), AdminBooking
    )

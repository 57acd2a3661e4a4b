from typing import Annotated, Optional, List
from pydantic import BaseModel, Field, UUID4
from decimal import Decimal
from datetime import date, time, datetime

from app.schemas.user import UserSummary


# Booking — Create (POST /bookings)
class BookingCreate(BaseModel):
    showtime_id: UUID4
    seats: Annotated[List[str], Field(max_length=20)] = []


# Nested showtime summary for booking history
class BookingShowtimeSummary(BaseModel):
    show_date: date
    show_time: time
    ticket_price: Decimal
    movie_title: str
    poster_url: Optional[str] = None
    hall_name: str


# Booking — Full response (POST /bookings, GET /bookings/{id})
class Booking(BaseModel):
    id: UUID4
    user_id: UUID4
    showtime_id: UUID4
    seats: List[str]
    released_seats: List[str] = []
    total_price: Decimal
    booking_status: str
    created_at: datetime
    showtime: Optional[BookingShowtimeSummary] = None

    class Config:
        from_attributes = True


# Booking — Admin view (GET /admin/bookings, includes user info)
class AdminBooking(Booking):
    user: Optional[UserSummary] = None

    class Config:
        from_attributes = True

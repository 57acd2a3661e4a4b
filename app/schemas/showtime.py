from typing import Optional
from pydantic import BaseModel, Field, UUID4
from decimal import Decimal
from datetime import date, time, datetime

from app.schemas.hall import HallSummary
from app.schemas.movie import MovieSummary


class ShowtimeCreate(BaseModel):
    movie_id: UUID4
    hall_id: UUID4
    show_date: date
    show_time: time
    ticket_price: Decimal = Field(ge=0, max_digits=10, decimal_places=2)


class ShowtimeUpdate(BaseModel):
    show_date: Optional[date] = None
    show_time: Optional[time] = None
    ticket_price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)


class Showtime(BaseModel):
    id: UUID4
    movie_id: UUID4
    hall_id: UUID4
    show_date: date
    show_time: time
    ticket_price: Decimal
    created_at: datetime

    class Config:
        from_attributes = True


# Showtime with hall name — movie detail page (date/time picker)
class ShowtimeWithHall(Showtime):
    hall: HallSummary

    class Config:
        from_attributes = True


# Showtime with movie and hall — seat selection header
class ShowtimeDetail(Showtime):
    movie: MovieSummary
    hall: HallSummary

    class Config:
        from_attributes = True

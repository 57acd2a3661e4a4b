from typing import Optional, List
from pydantic import BaseModel, Field, UUID4
from datetime import datetime


# One row descriptor of a hall layout, stored verbatim in theater_halls.seat_layout.
# Only the shape is checked here; seat counts and types are validated by
# app.utils.seat_layout so that stored data goes through the same rules.
class SeatRowLayout(BaseModel):
    row: str
    cols: int
    type: str


class SeatLayout(BaseModel):
    seats: List[SeatRowLayout]


class HallCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    seat_layout: SeatLayout


class HallUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    seat_layout: Optional[SeatLayout] = None


class Hall(BaseModel):
    id: UUID4
    name: str
    rows: int
    columns: int
    seat_layout: SeatLayout
    created_at: datetime

    class Config:
        from_attributes = True


# Compact hall for nested responses (showtime, seat map)
class HallSummary(BaseModel):
    id: UUID4
    name: str

    class Config:
        from_attributes = True

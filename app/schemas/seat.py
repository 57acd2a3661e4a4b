from typing import List
from pydantic import BaseModel, UUID4
from decimal import Decimal

from app.schemas.hall import HallSummary
from app.utils.availability import SeatState


# --- Seat Map (seat selection screen) ---

class SeatStatus(BaseModel):
    label: str
    number: int
    type: str
    state: SeatState


class SeatRow(BaseModel):
    label: str
    seats: List[SeatStatus]


class SeatCounts(BaseModel):
    available: int
    selected: int
    booked: int


class SeatMapResponse(BaseModel):
    showtime_id: UUID4
    hall: HallSummary
    ticket_price: Decimal
    rows: List[SeatRow]
    counts: SeatCounts
    selected_total: Decimal

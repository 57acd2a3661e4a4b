from app.schemas.common import PaginatedResponse, ErrorResponse, SeatsUnavailableError
from app.schemas.user import User, UserCreate, AdminCreate, UserUpdate, UserSummary, Token
from app.schemas.movie import Movie, MovieCreate, MovieUpdate, MovieSummary
from app.schemas.hall import Hall, HallCreate, HallUpdate, HallSummary, SeatLayout, SeatRowLayout
from app.schemas.showtime import (
    Showtime, ShowtimeCreate, ShowtimeUpdate, ShowtimeWithHall, ShowtimeDetail,
)
from app.schemas.seat import SeatMapResponse, SeatRow, SeatStatus, SeatCounts
from app.schemas.booking import Booking, BookingCreate, BookingShowtimeSummary, AdminBooking

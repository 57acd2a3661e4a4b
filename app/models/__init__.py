from app.db.session import Base
from app.models.user import User
from app.models.movie import Movie
from app.models.hall import TheaterHall
from app.models.showtime import Showtime
from app.models.booking import Booking, BookedSeat

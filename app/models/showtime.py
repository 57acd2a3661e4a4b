import uuid
from sqlalchemy import Column, Date, Time, DateTime, func, DECIMAL, ForeignKey
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from app.db.session import Base

class Showtime(Base):
    __tablename__ = "showtimes"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    movie_id = Column(UUID(as_uuid=True), ForeignKey("movies.id", ondelete="CASCADE"), nullable=False, index=True)
    hall_id = Column(UUID(as_uuid=True), ForeignKey("theater_halls.id", ondelete="CASCADE"), nullable=False, index=True)
    show_date = Column(Date, nullable=False, index=True)
    show_time = Column(Time, nullable=False)
    ticket_price = Column(DECIMAL(10, 2), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    movie = relationship("Movie", back_populates="showtimes")
    hall = relationship("TheaterHall", back_populates="showtimes")
    bookings = relationship("Booking", back_populates="showtime", cascade="all, delete-orphan")
    booked_seats = relationship("BookedSeat", back_populates="showtime", cascade="all, delete-orphan")

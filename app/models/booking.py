import uuid
from sqlalchemy import Column, String, Text, DateTime, func, DECIMAL, ForeignKey, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from app.db.session import Base
from app.models.movie import StringList

class Booking(Base):
    __tablename__ = "bookings"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    showtime_id = Column(UUID(as_uuid=True), ForeignKey("showtimes.id", ondelete="CASCADE"), nullable=False, index=True)
    seats = Column(StringList, nullable=False)
    # Seats given back by a cancellation; seats itself mirrors the live booked_seats
    released_seats = Column(StringList, nullable=False, default=list)
    total_price = Column(DECIMAL(10, 2), nullable=False)
    booking_status = Column(String(20), nullable=False, default="confirmed", index=True) # confirmed, cancelled
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    user = relationship("User", back_populates="bookings")
    showtime = relationship("Showtime", back_populates="bookings")
    booked_seats = relationship("BookedSeat", back_populates="booking", cascade="all, delete-orphan")

class BookedSeat(Base):
    """One reserved seat of one showtime. The unique key is what prevents double-booking."""

    __tablename__ = "booked_seats"
    __table_args__ = (
        UniqueConstraint("showtime_id", "seat_label", name="uq_booked_seats_showtime_seat"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    showtime_id = Column(UUID(as_uuid=True), ForeignKey("showtimes.id", ondelete="CASCADE"), nullable=False, index=True)
    seat_label = Column(Text, nullable=False)
    booking_id = Column(UUID(as_uuid=True), ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    booking = relationship("Booking", back_populates="booked_seats")
    showtime = relationship("Showtime", back_populates="booked_seats")

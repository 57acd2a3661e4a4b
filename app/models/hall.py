import uuid
from sqlalchemy import Column, String, Integer, DateTime, func, JSON
from sqlalchemy.dialects.postgresql import UUID, JSONB
from sqlalchemy.orm import relationship
from app.db.session import Base

class TheaterHall(Base):
    __tablename__ = "theater_halls"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(100), unique=True, nullable=False)
    rows = Column(Integer, nullable=False)
    columns = Column(Integer, nullable=False)
    # {"seats": [{"row": "A", "cols": 10, "type": "standard"}, ...]}
    seat_layout = Column(JSON().with_variant(JSONB, "postgresql"), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    showtimes = relationship("Showtime", back_populates="hall", cascade="all, delete-orphan")

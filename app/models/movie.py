import uuid
from sqlalchemy import Column, String, DateTime, func, Text, Integer, JSON
from sqlalchemy.dialects.postgresql import UUID, ARRAY
from sqlalchemy.orm import relationship
from app.db.session import Base

# text[] on PostgreSQL, JSON list elsewhere
StringList = JSON().with_variant(ARRAY(Text), "postgresql")

class Movie(Base):
    __tablename__ = "movies"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    title = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=True)
    poster_url = Column(Text, nullable=True)
    trailer_url = Column(Text, nullable=True)
    duration = Column(Integer, nullable=False) # minutes
    genres = Column(StringList, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    showtimes = relationship("Showtime", back_populates="movie", cascade="all, delete-orphan")

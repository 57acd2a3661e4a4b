from typing import Optional, List
from pydantic import BaseModel, Field, UUID4
from datetime import datetime


class MovieBase(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    poster_url: Optional[str] = None
    trailer_url: Optional[str] = None
    duration: int = Field(gt=0, description="Running time in minutes")
    genres: List[str] = []


class MovieCreate(MovieBase):
    pass


class MovieUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    poster_url: Optional[str] = None
    trailer_url: Optional[str] = None
    duration: Optional[int] = Field(None, gt=0)
    genres: Optional[List[str]] = None


class Movie(MovieBase):
    id: UUID4
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# Compact movie for showtime and booking responses
class MovieSummary(BaseModel):
    id: UUID4
    title: str
    poster_url: Optional[str] = None
    duration: int

    class Config:
        from_attributes = True

from uuid import UUID
from typing import List, Optional
from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session, joinedload

from app.db.session import get_db
from app.core.exceptions import NotFoundError
from app.models.movie import Movie
from app.models.showtime import Showtime
from app.schemas.movie import Movie as MovieSchema
from app.schemas.showtime import ShowtimeWithHall
from app.schemas.common import PaginatedResponse, paginate

router = APIRouter(prefix="/movies", tags=["Movies"])


# ---------------------------------------------------------------------------
# Browse
# ---------------------------------------------------------------------------


@router.get("/", response_model=PaginatedResponse[MovieSchema])
def list_movies(
    search: Optional[str] = Query(None, description="Case-insensitive title search"),
    genre: Optional[str] = Query(None, description="Only movies tagged with this genre"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
):
    """Newest movies first, optionally narrowed by title and genre."""
    query = db.query(Movie)
    if search:
        query = query.filter(Movie.title.ilike(f"%{search.strip()}%"))
    query = query.order_by(Movie.created_at.desc(), Movie.title)

    if genre:
        # genres is text[] on PostgreSQL but JSON elsewhere, so match in Python
        movies = [m for m in query.all() if genre in (m.genres or [])]
        total = len(movies)
        items = movies[(page - 1) * limit: page * limit]
    else:
        total = query.count()
        items = query.offset((page - 1) * limit).limit(limit).all()

    return PaginatedResponse(**paginate(items, total, page, limit))


@router.get("/genres", response_model=List[str])
def list_genres(db: Session = Depends(get_db)):
    """Every genre used by at least one movie, alphabetically."""
    genres = set()
    for (movie_genres,) in db.query(Movie.genres).all():
        genres.update(movie_genres or [])
    return sorted(genres)


@router.get("/{movie_id}", response_model=MovieSchema)
def get_movie(movie_id: UUID, db: Session = Depends(get_db)):
    movie = db.query(Movie).filter(Movie.id == movie_id).first()
    if not movie:
        raise NotFoundError("Movie not found")
    return movie


# ---------------------------------------------------------------------------
# Showtimes for a movie (date/time picker)
# ---------------------------------------------------------------------------


@router.get("/{movie_id}/showtimes", response_model=List[ShowtimeWithHall])
def list_movie_showtimes(
    movie_id: UUID,
    show_date: Optional[date] = Query(None, description="Filter by specific date (YYYY-MM-DD)"),
    db: Session = Depends(get_db),
):
    """
    Upcoming showtimes for a movie, ordered by date then time.
    Past dates are never returned.
    """
    if not db.query(Movie.id).filter(Movie.id == movie_id).first():
        raise NotFoundError("Movie not found")

    query = (
        db.query(Showtime)
        .options(joinedload(Showtime.hall))
        .filter(Showtime.movie_id == movie_id, Showtime.show_date >= date.today())
    )
    if show_date:
        query = query.filter(Showtime.show_date == show_date)

    return query.order_by(Showtime.show_date, Showtime.show_time).all()

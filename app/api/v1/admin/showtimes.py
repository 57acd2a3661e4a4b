from uuid import UUID
from typing import List, Optional
from datetime import date, datetime, time, timedelta

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session, joinedload

from app.db.session import get_db
from app.core.exceptions import ConflictError, NotFoundError
from app.api.deps import get_current_admin_user
from app.models.user import User
from app.models.movie import Movie
from app.models.hall import TheaterHall
from app.models.showtime import Showtime
from app.schemas.showtime import ShowtimeCreate, ShowtimeUpdate, ShowtimeDetail

router = APIRouter(prefix="/admin/showtimes", tags=["Admin - Showtimes"])


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _screening_window(show_date: date, show_time: time, duration: int):
    start = datetime.combine(show_date, show_time)
    return start, start + timedelta(minutes=duration)


def _check_hall_overlap(
    db: Session,
    hall_id: UUID,
    show_date: date,
    show_time: time,
    duration: int,
    exclude_showtime_id: UUID | None = None,
):
    """Raise 409 if the hall is already screening something in that window."""
    start, end = _screening_window(show_date, show_time, duration)

    query = (
        db.query(Showtime)
        .options(joinedload(Showtime.movie))
        .filter(
            Showtime.hall_id == hall_id,
            # A screening that starts the day before can run past midnight
            Showtime.show_date.between(show_date - timedelta(days=1), show_date + timedelta(days=1)),
        )
    )
    if exclude_showtime_id:
        query = query.filter(Showtime.id != exclude_showtime_id)

    for other in query.all():
        other_start, other_end = _screening_window(
            other.show_date, other.show_time, other.movie.duration
        )
        if other_start < end and start < other_end:
            raise ConflictError(
                f"Hall is already screening '{other.movie.title}' from "
                f"{other_start:%Y-%m-%d %H:%M} to {other_end:%H:%M} (showtime {other.id})"
            )


def _load(db: Session, showtime_id: UUID) -> Showtime:
    showtime = (
        db.query(Showtime)
        .options(joinedload(Showtime.movie), joinedload(Showtime.hall))
        .filter(Showtime.id == showtime_id)
        .first()
    )
    if not showtime:
        raise NotFoundError("Showtime not found")
    return showtime


# ---------------------------------------------------------------------------
# Showtime CRUD
# ---------------------------------------------------------------------------


@router.post("/", response_model=ShowtimeDetail, status_code=status.HTTP_201_CREATED)
def create_showtime(
    data: ShowtimeCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin_user),
):
    movie = db.query(Movie).filter(Movie.id == data.movie_id).first()
    if not movie:
        raise NotFoundError("Movie not found")
    if not db.query(TheaterHall.id).filter(TheaterHall.id == data.hall_id).first():
        raise NotFoundError("Hall not found")

    _check_hall_overlap(db, data.hall_id, data.show_date, data.show_time, movie.duration)

    showtime = Showtime(**data.model_dump())
    db.add(showtime)
    db.commit()
    return _load(db, showtime.id)


@router.get("/", response_model=List[ShowtimeDetail])
def list_showtimes(
    movie_id: Optional[UUID] = Query(None),
    hall_id: Optional[UUID] = Query(None),
    show_date: Optional[date] = Query(None, description="Filter by date (omit to see everything)"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin_user),
):
    query = db.query(Showtime).options(joinedload(Showtime.movie), joinedload(Showtime.hall))
    if movie_id:
        query = query.filter(Showtime.movie_id == movie_id)
    if hall_id:
        query = query.filter(Showtime.hall_id == hall_id)
    if show_date:
        query = query.filter(Showtime.show_date == show_date)
    return query.order_by(Showtime.show_date, Showtime.show_time).all()


@router.patch("/{id}", response_model=ShowtimeDetail)
def update_showtime(
    id: UUID,
    data: ShowtimeUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin_user),
):
    """Move a showtime or change its price. Existing bookings keep the price they paid."""
    showtime = _load(db, id)
    changes = data.model_dump(exclude_unset=True)

    if "show_date" in changes or "show_time" in changes:
        _check_hall_overlap(
            db,
            showtime.hall_id,
            changes.get("show_date", showtime.show_date),
            changes.get("show_time", showtime.show_time),
            showtime.movie.duration,
            exclude_showtime_id=showtime.id,
        )

    for field, value in changes.items():
        if value is not None:
            setattr(showtime, field, value)

    db.commit()
    return _load(db, id)


@router.delete("/{id}", status_code=status.HTTP_200_OK)
def delete_showtime(
    id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin_user),
):
    """Delete a showtime with its bookings and reserved seats."""
    showtime = _load(db, id)
    db.delete(showtime)
    db.commit()
    return {"id": str(id), "deleted": True}

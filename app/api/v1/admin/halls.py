import logging
from uuid import UUID
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.core.exceptions import ConflictError, NotFoundError
from app.api.deps import get_current_admin_user
from app.models.user import User
from app.models.hall import TheaterHall
from app.models.showtime import Showtime
from app.schemas.hall import HallCreate, HallUpdate, Hall as HallSchema, SeatLayout
from app.utils.seat_layout import resolve_layout

router = APIRouter(prefix="/admin/halls", tags=["Admin - Halls"])

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _apply_layout(hall: TheaterHall, layout: SeatLayout) -> None:
    """Validate a layout and store it with the derived row/column counts."""
    resolved = resolve_layout(layout.model_dump())
    hall.seat_layout = resolved.to_dict()
    hall.rows = resolved.row_count
    hall.columns = resolved.max_columns


def _ensure_unique_name(db: Session, name: str, exclude_id: UUID | None = None) -> None:
    query = db.query(TheaterHall.id).filter(TheaterHall.name == name)
    if exclude_id:
        query = query.filter(TheaterHall.id != exclude_id)
    if query.first():
        raise ConflictError(f"A hall named '{name}' already exists")


# ---------------------------------------------------------------------------
# Hall CRUD
# ---------------------------------------------------------------------------


@router.post("/", response_model=HallSchema, status_code=status.HTTP_201_CREATED)
def create_hall(
    data: HallCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin_user),
):
    """Create a hall. A malformed seat layout is rejected with 422 `malformed_layout`."""
    _ensure_unique_name(db, data.name)

    hall = TheaterHall(name=data.name)
    _apply_layout(hall, data.seat_layout)
    db.add(hall)
    db.commit()
    db.refresh(hall)
    logger.info("Hall %s created with %d rows", hall.name, hall.rows)
    return hall


@router.get("/", response_model=List[HallSchema])
def list_halls(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin_user),
):
    return db.query(TheaterHall).order_by(TheaterHall.name).all()


@router.get("/{id}", response_model=HallSchema)
def get_hall(
    id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin_user),
):
    hall = db.query(TheaterHall).filter(TheaterHall.id == id).first()
    if not hall:
        raise NotFoundError("Hall not found")
    return hall


@router.patch("/{id}", response_model=HallSchema)
def update_hall(
    id: UUID,
    data: HallUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin_user),
):
    """
    Rename a hall or replace its layout.
    The layout is frozen once any showtime uses the hall, since seat
    labels of existing bookings must keep pointing at the same seats.
    """
    hall = db.query(TheaterHall).filter(TheaterHall.id == id).first()
    if not hall:
        raise NotFoundError("Hall not found")

    if data.name is not None:
        _ensure_unique_name(db, data.name, exclude_id=hall.id)
        hall.name = data.name

    if data.seat_layout is not None:
        in_use = db.query(Showtime.id).filter(Showtime.hall_id == hall.id).first()
        if in_use:
            raise ConflictError("Seat layout cannot change once the hall has showtimes")
        _apply_layout(hall, data.seat_layout)

    db.commit()
    db.refresh(hall)
    return hall


@router.delete("/{id}", status_code=status.HTTP_200_OK)
def delete_hall(
    id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin_user),
):
    """Delete a hall with all of its showtimes and their bookings."""
    hall = db.query(TheaterHall).filter(TheaterHall.id == id).first()
    if not hall:
        raise NotFoundError("Hall not found")

    db.delete(hall)
    db.commit()
    return {"id": str(id), "deleted": True}

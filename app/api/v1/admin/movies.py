from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.core.exceptions import NotFoundError
from app.api.deps import get_current_admin_user
from app.models.user import User
from app.models.movie import Movie
from app.schemas.movie import MovieCreate, MovieUpdate, Movie as MovieSchema

router = APIRouter(prefix="/admin/movies", tags=["Admin - Movies"])


@router.post("/", response_model=MovieSchema, status_code=status.HTTP_201_CREATED)
def create_movie(
    data: MovieCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin_user),
):
    movie = Movie(**data.model_dump())
    db.add(movie)
    db.commit()
    db.refresh(movie)
    return movie


@router.patch("/{id}", response_model=MovieSchema)
def update_movie(
    id: UUID,
    data: MovieUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin_user),
):
    movie = db.query(Movie).filter(Movie.id == id).first()
    if not movie:
        raise NotFoundError("Movie not found")

    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(movie, field, value)

    db.commit()
    db.refresh(movie)
    return movie


@router.delete("/{id}", status_code=status.HTTP_200_OK)
def delete_movie(
    id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin_user),
):
    """Delete a movie together with its showtimes, their bookings and reserved seats."""
    movie = db.query(Movie).filter(Movie.id == id).first()
    if not movie:
        raise NotFoundError("Movie not found")

    db.delete(movie)
    db.commit()
    return {"id": str(id), "deleted": True}

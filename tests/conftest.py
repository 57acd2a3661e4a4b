import os

# Settings are read at import time, so configure them before importing the app
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret"
os.environ["ADMIN_SECRET_KEY"] = "test-admin-secret"

from datetime import date, time, timedelta
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.main import app
from app.db.base import Base
from app.db.session import get_db
from app.models.user import User
from app.models.movie import Movie
from app.models.hall import TheaterHall
from app.models.showtime import Showtime

ADMIN_SECRET = "test-admin-secret"

SMALL_LAYOUT = {
    "seats": [
        {"row": "A", "cols": 2, "type": "standard"},
        {"row": "B", "cols": 2, "type": "standard"},
    ]
}


@pytest.fixture
def engine():
    # One shared in-memory connection, usable from TestClient's worker threads
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Data helpers
# ---------------------------------------------------------------------------


def make_user(db, email="viewer@example.com", role="user") -> User:
    user = User(email=email, password_hash="not-a-real-hash", full_name="Viewer", role=role)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def user(db):
    return make_user(db)


@pytest.fixture
def other_user(db):
    return make_user(db, email="rival@example.com")


@pytest.fixture
def showtime(db) -> Showtime:
    """Tomorrow 19:30 in a 2x2 hall (A1 A2 / B1 B2) at 10.00 per seat."""
    movie = Movie(title="Night Train", duration=120, genres=["Drama"])
    hall = TheaterHall(name="Hall 1", rows=2, columns=2, seat_layout=SMALL_LAYOUT)
    db.add_all([movie, hall])
    db.flush()
    showtime = Showtime(
        movie_id=movie.id,
        hall_id=hall.id,
        show_date=date.today() + timedelta(days=1),
        show_time=time(19, 30),
        ticket_price=Decimal("10.00"),
    )
    db.add(showtime)
    db.commit()
    db.refresh(showtime)
    return showtime


# ---------------------------------------------------------------------------
# API auth helpers
# ---------------------------------------------------------------------------


def register(client, email, password="secret123", admin=False) -> dict:
    body = {"email": email, "password": password, "full_name": email.split("@")[0]}
    path = "/api/v1/auth/register"
    if admin:
        body["admin_secret"] = ADMIN_SECRET
        path = "/api/v1/auth/admin/register"
    response = client.post(path, json=body)
    assert response.status_code == 201, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
def user_headers(client):
    return register(client, "alice@example.com")


@pytest.fixture
def rival_headers(client):
    return register(client, "bob@example.com")


@pytest.fixture
def admin_headers(client):
    return register(client, "admin@example.com", admin=True)

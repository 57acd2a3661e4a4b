import uuid
from decimal import Decimal

from app.core.feed import availability_feed

BOOKINGS = "/api/v1/bookings/"


def seat_map(client, showtime_id, selected=()):
    response = client.get(
        f"/api/v1/showtimes/{showtime_id}/seat-map",
        params=[("selected", label) for label in selected],
    )
    assert response.status_code == 200, response.text
    return response.json()


def states(body):
    return {seat["label"]: seat["state"] for row in body["rows"] for seat in row["seats"]}


def book(client, headers, showtime_id, seats):
    return client.post(
        BOOKINGS, json={"showtime_id": str(showtime_id), "seats": seats}, headers=headers
    )


# ---------------------------------------------------------------------------
# POST /bookings
# ---------------------------------------------------------------------------


def test_booking_two_seats(client, showtime, user_headers):
    response = book(client, user_headers, showtime.id, ["A2", "A1"])

    assert response.status_code == 201, response.text
    body = response.json()
    assert body["seats"] == ["A1", "A2"]
    assert body["released_seats"] == []
    assert Decimal(body["total_price"]) == Decimal("20.00")
    assert body["booking_status"] == "confirmed"
    assert body["showtime"]["movie_title"] == "Night Train"
    assert body["showtime"]["hall_name"] == "Hall 1"


def test_booking_requires_sign_in(client, showtime):
    response = book(client, {}, showtime.id, ["A1"])

    assert response.status_code == 401
    assert response.json()["error"] == "authentication_required"
    assert response.headers["www-authenticate"] == "Bearer"


def test_empty_selection_is_rejected(client, showtime, user_headers):
    response = book(client, user_headers, showtime.id, [])

    assert response.status_code == 400
    assert response.json()["error"] == "empty_selection"


def test_unknown_seat_is_rejected(client, showtime, user_headers):
    response = book(client, user_headers, showtime.id, ["A1", "Z9"])

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "unknown_seat"
    assert body["unavailable_seats"] == ["Z9"]


def test_unknown_showtime(client, user_headers):
    response = book(client, user_headers, uuid.uuid4(), ["A1"])

    assert response.status_code == 404
    assert response.json()["error"] == "not_found"


def test_conflict_names_taken_seats_and_books_nothing(client, showtime, user_headers, rival_headers):
    assert book(client, user_headers, showtime.id, ["A1", "A2"]).status_code == 201

    response = book(client, rival_headers, showtime.id, ["A2", "B1"])

    assert response.status_code == 409
    body = response.json()
    assert body["error"] == "seat_conflict"
    assert body["unavailable_seats"] == ["A2"]
    # B1 was not booked on the side
    assert states(seat_map(client, showtime.id))["B1"] == "available"

    mine = client.get(BOOKINGS, headers=rival_headers).json()
    assert mine["total"] == 0


def test_booking_notifies_seat_viewers(client, showtime, user_headers):
    calls = []
    subscription = availability_feed.register(showtime.id, calls.append)
    try:
        book(client, user_headers, showtime.id, ["B2"])
        book(client, user_headers, showtime.id, ["B2"])
    finally:
        availability_feed.unregister(subscription)

    # The rejected second attempt changed nothing
    assert calls == [showtime.id]


# ---------------------------------------------------------------------------
# Seat map
# ---------------------------------------------------------------------------


def test_seat_map_of_fresh_showtime(client, showtime):
    body = seat_map(client, showtime.id)

    assert [row["label"] for row in body["rows"]] == ["A", "B"]
    assert [seat["label"] for seat in body["rows"][0]["seats"]] == ["A1", "A2"]
    assert set(states(body).values()) == {"available"}
    assert body["counts"] == {"available": 4, "selected": 0, "booked": 0}
    assert body["hall"]["name"] == "Hall 1"


def test_seat_map_marks_selection_and_bookings(client, showtime, user_headers):
    book(client, user_headers, showtime.id, ["A1"])

    body = seat_map(client, showtime.id, selected=["A1", "B1"])

    assert states(body) == {"A1": "booked", "A2": "available", "B1": "selected", "B2": "available"}
    assert body["counts"] == {"available": 2, "selected": 1, "booked": 1}
    assert Decimal(body["selected_total"]) == Decimal("10.00")


def test_seat_map_unknown_showtime(client):
    response = client.get(f"/api/v1/showtimes/{uuid.uuid4()}/seat-map")

    assert response.status_code == 404


def test_seat_stream_unknown_showtime(client):
    response = client.get(f"/api/v1/showtimes/{uuid.uuid4()}/seats/stream")

    assert response.status_code == 404


def test_showtime_detail(client, showtime):
    response = client.get(f"/api/v1/showtimes/{showtime.id}")

    assert response.status_code == 200
    body = response.json()
    assert body["movie"]["title"] == "Night Train"
    assert body["hall"]["name"] == "Hall 1"
    assert Decimal(body["ticket_price"]) == Decimal("10.00")


# ---------------------------------------------------------------------------
# Booking history
# ---------------------------------------------------------------------------


def test_list_and_get_own_bookings(client, showtime, user_headers, rival_headers):
    booking_id = book(client, user_headers, showtime.id, ["B1"]).json()["id"]
    book(client, rival_headers, showtime.id, ["B2"])

    mine = client.get(BOOKINGS, headers=user_headers).json()
    assert mine["total"] == 1
    assert mine["data"][0]["id"] == booking_id

    detail = client.get(f"{BOOKINGS}{booking_id}", headers=user_headers)
    assert detail.status_code == 200
    assert detail.json()["seats"] == ["B1"]

    # Someone else's booking does not exist as far as the rival can tell
    other = client.get(f"{BOOKINGS}{booking_id}", headers=rival_headers)
    assert other.status_code == 404
    assert other.json() == {"error": "not_found", "message": "Booking not found"}


def test_filter_bookings_by_status(client, showtime, user_headers):
    book(client, user_headers, showtime.id, ["A1"])

    assert client.get(BOOKINGS, params={"status": "confirmed"}, headers=user_headers).json()["total"] == 1
    assert client.get(BOOKINGS, params={"status": "cancelled"}, headers=user_headers).json()["total"] == 0


# ---------------------------------------------------------------------------
# Admin cancellation
# ---------------------------------------------------------------------------


def test_admin_cancel_releases_seats(client, showtime, user_headers, rival_headers, admin_headers):
    booking_id = book(client, user_headers, showtime.id, ["A1", "A2"]).json()["id"]

    response = client.patch(f"/api/v1/admin/bookings/{booking_id}/cancel", headers=admin_headers)

    assert response.status_code == 200, response.text
    body = response.json()
    assert body["booking_status"] == "cancelled"
    assert body["seats"] == []
    assert body["released_seats"] == ["A1", "A2"]
    assert body["user"]["email"] == "alice@example.com"
    assert set(states(seat_map(client, showtime.id)).values()) == {"available"}
    assert book(client, rival_headers, showtime.id, ["A1"]).status_code == 201


def test_cancel_requires_admin(client, showtime, user_headers):
    booking_id = book(client, user_headers, showtime.id, ["A1"]).json()["id"]

    response = client.patch(f"/api/v1/admin/bookings/{booking_id}/cancel", headers=user_headers)

    assert response.status_code == 403
    assert response.json()["error"] == "forbidden"


def test_admin_lists_bookings_per_showtime(client, showtime, user_headers, rival_headers, admin_headers):
    book(client, user_headers, showtime.id, ["A1"])
    book(client, rival_headers, showtime.id, ["B1"])

    response = client.get(
        "/api/v1/admin/bookings/", params={"showtime_id": str(showtime.id)}, headers=admin_headers
    )

    assert response.status_code == 200
    body = response.json()
    assert body["total"] == 2
    assert {b["user"]["email"] for b in body["data"]} == {"alice@example.com", "bob@example.com"}


def test_cancel_unknown_booking(client, admin_headers):
    response = client.patch(f"/api/v1/admin/bookings/{uuid.uuid4()}/cancel", headers=admin_headers)

    assert response.status_code == 404
    assert response.json()["error"] == "not_found"

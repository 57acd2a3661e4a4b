from app.utils.availability import SeatState, count_states, project_availability
from app.utils.seat_layout import resolve_layout

LAYOUT = resolve_layout({"seats": [
    {"row": "A", "cols": 2, "type": "standard"},
    {"row": "B", "cols": 2, "type": "premium"},
]})


def states(projection):
    return {seat.label: seat.state for seat in projection}


def test_nothing_reserved_nothing_selected():
    projection = project_availability(LAYOUT, reserved=set())

    assert set(states(projection).values()) == {SeatState.available}
    assert len(projection) == 4


def test_every_seat_gets_exactly_one_state():
    projection = project_availability(LAYOUT, reserved={"A1"}, selected={"B2"})

    assert states(projection) == {
        "A1": SeatState.booked,
        "A2": SeatState.available,
        "B1": SeatState.available,
        "B2": SeatState.selected,
    }


def test_booked_seats_are_exactly_the_reserved_ones():
    reserved = {"A2", "B1"}
    projection = project_availability(LAYOUT, reserved=reserved, selected={"A1"})

    booked = {s.label for s in projection if s.state is SeatState.booked}
    assert booked == reserved


def test_reserved_seat_is_booked_even_when_selected():
    projection = project_availability(LAYOUT, reserved={"A1"}, selected={"A1", "A2"})

    assert states(projection)["A1"] is SeatState.booked
    assert states(projection)["A2"] is SeatState.selected


def test_labels_outside_the_layout_are_ignored():
    projection = project_availability(LAYOUT, reserved={"Z9"}, selected={"Q1"})

    assert [s.label for s in projection] == ["A1", "A2", "B1", "B2"]
    assert set(states(projection).values()) == {SeatState.available}


def test_projection_follows_layout_order_and_keeps_seat_type():
    projection = project_availability(LAYOUT, reserved=set())

    assert [s.seat.seat_type for s in projection] == ["standard", "standard", "premium", "premium"]


def test_count_states():
    projection = project_availability(LAYOUT, reserved={"A1", "A2"}, selected={"B1"})

    assert count_states(projection) == {
        SeatState.available: 1,
        SeatState.selected: 1,
        SeatState.booked: 2,
    }

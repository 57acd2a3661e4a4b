"""Availability projection of a showtime's seats and the per-viewer pending seat selection."""

import enum
from dataclasses import dataclass
from typing import Callable, Collection, Dict, FrozenSet, Iterable, List, Set, TypeVar

from app.core.exceptions import EmptySelectionError
from app.utils.seat_layout import LayoutSeat

T = TypeVar("T")


class SeatState(str, enum.Enum):
    available = "available"
    selected = "selected"
    booked = "booked"


@dataclass(frozen=True)
class ProjectedSeat:
    seat: LayoutSeat
    state: SeatState

    @property
    def label(self) -> str:
        return self.seat.label


def seat_state(label: str, reserved: Collection[str], selected: Collection[str]) -> SeatState:
    # Reserved wins over everything, including the reserving user's own selection
    if label in reserved:
        return SeatState.booked
    if label in selected:
        return SeatState.selected
    return SeatState.available


def project_availability(
    seats: Iterable[LayoutSeat],
    reserved: Collection[str],
    selected: Collection[str] = frozenset(),
) -> List[ProjectedSeat]:
    """
    Give every seat of a layout exactly one state.

    ``reserved`` is the showtime's current set of booked seat labels and
    ``selected`` the viewer's pending, uncommitted selection. Labels in either
    collection that are not part of the layout are ignored.
    """
    reserved = frozenset(reserved)
    selected = frozenset(selected)
    return [ProjectedSeat(seat, seat_state(seat.label, reserved, selected)) for seat in seats]


def count_states(projection: Iterable[ProjectedSeat]) -> Dict[SeatState, int]:
    counts = {state: 0 for state in SeatState}
    for seat in projection:
        counts[seat.state] += 1
    return counts


class SeatSelection:
    """
    A viewer's pending seat selection for one showtime.

    Each client owns its own instance. Adding and removing are idempotent;
    seats that are already booked can never be added.
    """

    def __init__(self, seats: Iterable[str] = ()):
        self._seats: Set[str] = set(seats)

    @property
    def seats(self) -> FrozenSet[str]:
        return frozenset(self._seats)

    def __contains__(self, label: object) -> bool:
        return label in self._seats

    def __len__(self) -> int:
        return len(self._seats)

    def select(self, label: str, reserved: Collection[str] = ()) -> bool:
        if label in reserved:
            return False
        self._seats.add(label)
        return True

    def deselect(self, label: str) -> None:
        self._seats.discard(label)

    def toggle(self, label: str, reserved: Collection[str] = ()) -> bool:
        """Flip one seat. Returns whether the seat is selected afterwards."""
        if label in reserved:
            return label in self._seats
        if label in self._seats:
            self._seats.discard(label)
            return False
        self._seats.add(label)
        return True

    def reconcile(self, reserved: Collection[str]) -> Set[str]:
        """Drop seats someone else booked since they were picked; returns the dropped labels."""
        lost = {label for label in self._seats if label in reserved}
        self._seats -= lost
        return lost

    def clear(self) -> None:
        self._seats.clear()

    def submit(self, commit: Callable[[FrozenSet[str]], T]) -> T:
        """
        Hand the whole selection to ``commit``.

        The selection is cleared only when ``commit`` returns; if it raises,
        the seats stay selected so the user can adjust and retry.
        """
        if not self._seats:
            raise EmptySelectionError()
        result = commit(self.seats)
        self._seats.clear()
        return result

"""
Seat layout resolution.

A hall stores its seating compactly, one descriptor per row::

    {"seats": [{"row": "A", "cols": 10, "type": "standard"},
               {"row": "B", "cols": 12, "type": "premium"}]}

``resolve_layout`` validates the descriptors up front and returns a
``SeatLayout`` which expands them into individual seats on iteration.
Iterating again starts over from the first row, so the same object can be
projected any number of times.
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Mapping, Sequence, Set

from app.core.exceptions import MalformedLayoutError


@dataclass(frozen=True)
class SeatId:
    """Row label + 1-based column. Derived, never stored on its own."""

    row: str
    col: int

    @property
    def label(self) -> str:
        return f"{self.row}{self.col}"

    def __str__(self) -> str:
        return self.label


@dataclass(frozen=True)
class LayoutSeat:
    seat_id: SeatId
    seat_type: str

    @property
    def label(self) -> str:
        return self.seat_id.label

    @property
    def row(self) -> str:
        return self.seat_id.row

    @property
    def col(self) -> int:
        return self.seat_id.col


@dataclass(frozen=True)
class RowSpec:
    row: str
    cols: int
    seat_type: str

    def to_dict(self) -> Dict[str, Any]:
        return {"row": self.row, "cols": self.cols, "type": self.seat_type}


class SeatLayout:
    """Validated hall layout; iterates seats row by row in declaration order."""

    def __init__(self, rows: Sequence[RowSpec]):
        self._rows = tuple(rows)

    @property
    def rows(self) -> Sequence[RowSpec]:
        return self._rows

    @property
    def row_count(self) -> int:
        return len(self._rows)

    @property
    def max_columns(self) -> int:
        return max((r.cols for r in self._rows), default=0)

    def __iter__(self) -> Iterator[LayoutSeat]:
        for row_spec in self._rows:
            for col in range(1, row_spec.cols + 1):
                yield LayoutSeat(SeatId(row_spec.row, col), row_spec.seat_type)

    def __len__(self) -> int:
        return sum(r.cols for r in self._rows)

    def __contains__(self, label: object) -> bool:
        return label in self.labels()

    def labels(self) -> Set[str]:
        return {seat.label for seat in self}

    def to_dict(self) -> Dict[str, List[Dict[str, Any]]]:
        return {"seats": [r.to_dict() for r in self._rows]}


def _parse_row(index: int, entry: Any) -> RowSpec:
    if not isinstance(entry, Mapping):
        raise MalformedLayoutError(f"Row #{index + 1} must be an object with row, cols and type")

    row = entry.get("row")
    if not isinstance(row, str) or not row.strip():
        raise MalformedLayoutError(f"Row #{index + 1} is missing its row label")

    cols = entry.get("cols")
    # bool is an int subclass; True seats are not a seat count
    if isinstance(cols, bool) or not isinstance(cols, int):
        raise MalformedLayoutError(f"Row {row}: seat count must be an integer")
    if cols <= 0:
        raise MalformedLayoutError(f"Row {row}: seat count must be positive, got {cols}")

    seat_type = entry.get("type")
    if not isinstance(seat_type, str) or not seat_type.strip():
        raise MalformedLayoutError(f"Row {row}: missing seat type")

    return RowSpec(row=row.strip(), cols=cols, seat_type=seat_type.strip())


def resolve_layout(layout: Any) -> SeatLayout:
    """
    Validate a stored hall layout and return its seat expansion.

    Raises MalformedLayoutError when a row has a non-positive or non-integer
    seat count, a missing label or type, or when two seats end up with the
    same identifier.
    """
    if not isinstance(layout, Mapping) or not isinstance(layout.get("seats"), list):
        raise MalformedLayoutError("Layout must be an object with a 'seats' list")

    rows: List[RowSpec] = []
    seen: Set[str] = set()
    for index, entry in enumerate(layout["seats"]):
        row_spec = _parse_row(index, entry)
        if row_spec.row in seen:
            raise MalformedLayoutError(f"Row {row_spec.row} is declared more than once")
        seen.add(row_spec.row)
        rows.append(row_spec)

    resolved = SeatLayout(rows)
    # "A" + 11 and "A1" + 1 both read "A11"
    if len(resolved.labels()) != len(resolved):
        raise MalformedLayoutError("Row labels produce duplicate seat identifiers")
    return resolved

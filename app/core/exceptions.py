"""
Application error taxonomy.

Every error carries an HTTP status code and a short machine-readable code so
that the handlers registered in ``app.main`` can render them as
``ErrorResponse`` bodies without each router building its own HTTPException.
"""

from typing import Iterable, List


class AppError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code: int = 400
    error_code: str = "bad_request"

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)

    def to_dict(self) -> dict:
        return {"error": self.error_code, "message": self.message}


class NotFoundError(AppError):
    status_code = 404
    error_code = "not_found"


class PermissionDeniedError(AppError):
    status_code = 403
    error_code = "forbidden"


class ConflictError(AppError):
    """The request clashes with existing data (duplicate name, overlapping showtime)."""

    status_code = 409
    error_code = "conflict"


class AuthenticationRequiredError(AppError):
    """No user identity is attached to the request."""

    status_code = 401
    error_code = "authentication_required"

    def __init__(self, message: str = "Sign in to continue") -> None:
        super().__init__(message)


class MalformedLayoutError(AppError):
    """A hall's seat layout cannot be expanded into seats."""

    status_code = 422
    error_code = "malformed_layout"


class EmptySelectionError(AppError):
    status_code = 400
    error_code = "empty_selection"

    def __init__(self, message: str = "Select at least one seat") -> None:
        super().__init__(message)


class UnknownSeatError(AppError):
    """Requested seat labels that do not exist in the hall layout."""

    status_code = 400
    error_code = "unknown_seat"

    def __init__(self, seats: Iterable[str]) -> None:
        self.seats: List[str] = sorted(seats)
        super().__init__(f"Seats not in this hall: {', '.join(self.seats)}")

    def to_dict(self) -> dict:
        return {**super().to_dict(), "unavailable_seats": self.seats}


class SeatConflictError(AppError):
    """
    One or more requested seats are already reserved for the showtime.

    Nothing was written. The caller must re-fetch availability and re-select.
    ``seats`` may be empty when the store rejected the insert without telling
    us which seat lost the race.
    """

    status_code = 409
    error_code = "seat_conflict"

    def __init__(self, seats: Iterable[str] = ()) -> None:
        self.seats: List[str] = sorted(seats)
        if self.seats:
            message = f"Seats no longer available: {', '.join(self.seats)}"
        else:
            message = "One or more seats are no longer available"
        super().__init__(message)

    def to_dict(self) -> dict:
        return {**super().to_dict(), "unavailable_seats": self.seats}


class ReservationOutcomeUnknownError(AppError):
    """
    The store failed or timed out while committing a booking.

    The booking may or may not exist; refresh availability and the booking
    list before trying again.
    """

    status_code = 503
    error_code = "outcome_unknown"

    def __init__(self, message: str = "Booking status unknown, refresh before retrying") -> None:
        super().__init__(message)

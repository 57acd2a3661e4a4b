import asyncio
import json
import logging
from uuid import UUID
from typing import AsyncIterator, List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from sse_starlette.sse import EventSourceResponse

from app.db.session import get_db
from app.core.config import settings
from app.core.feed import AvailabilityFeed, availability_feed
from app.schemas.hall import HallSummary
from app.schemas.seat import SeatCounts, SeatMapResponse, SeatRow, SeatStatus
from app.schemas.showtime import ShowtimeDetail
from app.utils.availability import SeatState, count_states, project_availability
from app.utils.reservations import load_showtime, reserved_labels
from app.utils.seat_layout import resolve_layout

router = APIRouter(prefix="/showtimes", tags=["Showtimes"])

logger = logging.getLogger(__name__)


@router.get("/{showtime_id}", response_model=ShowtimeDetail)
def get_showtime(showtime_id: UUID, db: Session = Depends(get_db)):
    """Showtime with its movie and hall, shown above the seat map."""
    return load_showtime(db, showtime_id)


# ---------------------------------------------------------------------------
# Seat map (seat selection screen)
# ---------------------------------------------------------------------------


@router.get("/{showtime_id}/seat-map", response_model=SeatMapResponse)
def get_seat_map(
    showtime_id: UUID,
    selected: List[str] = Query([], description="Seats the viewer has picked but not booked yet"),
    db: Session = Depends(get_db),
):
    """
    Every seat of the showtime's hall with its current state, grouped by row.

    Pass the viewer's pending selection as repeated ``selected`` parameters to
    get them marked ``selected``; a pending seat someone else has booked in the
    meantime comes back ``booked``. Anyone can view availability.
    """
    showtime = load_showtime(db, showtime_id)
    layout = resolve_layout(showtime.hall.seat_layout)
    projection = project_availability(layout, reserved_labels(db, showtime.id), selected)

    rows: dict[str, SeatRow] = {}
    for projected in projection:
        row = rows.setdefault(projected.seat.row, SeatRow(label=projected.seat.row, seats=[]))
        row.seats.append(SeatStatus(
            label=projected.label,
            number=projected.seat.col,
            type=projected.seat.seat_type,
            state=projected.state,
        ))

    counts = count_states(projection)
    return SeatMapResponse(
        showtime_id=showtime.id,
        hall=HallSummary.model_validate(showtime.hall),
        ticket_price=showtime.ticket_price,
        rows=list(rows.values()),
        counts=SeatCounts(
            available=counts[SeatState.available],
            selected=counts[SeatState.selected],
            booked=counts[SeatState.booked],
        ),
        selected_total=showtime.ticket_price * counts[SeatState.selected],
    )


# ---------------------------------------------------------------------------
# Live seat feed (Server-Sent Events)
# ---------------------------------------------------------------------------


async def seat_change_events(
    showtime_id: UUID, feed: AvailabilityFeed = availability_feed
) -> AsyncIterator[dict]:
    """
    Yield a ``ready`` event, then one ``seats_changed`` event per change signal.

    Events carry no seat data: on every event (``ready`` included, since
    anything may have changed while the client was disconnected) the client
    re-fetches the seat map. Signals that arrive while one is still waiting to
    be sent are folded into it.
    """
    loop = asyncio.get_running_loop()
    signals: asyncio.Queue = asyncio.Queue(maxsize=1)
    payload = json.dumps({"showtime_id": str(showtime_id)})

    def _offer() -> None:
        if not signals.full():
            signals.put_nowait(showtime_id)

    # Feed handlers run in whichever thread committed the booking
    def _on_change(changed_id: UUID) -> None:
        loop.call_soon_threadsafe(_offer)

    subscription = feed.register(showtime_id, _on_change)
    logger.info("Seat stream opened for showtime %s", showtime_id)
    try:
        yield {"event": "ready", "data": payload}
        while True:
            await signals.get()
            yield {"event": "seats_changed", "data": payload}
    finally:
        feed.unregister(subscription)
        logger.info("Seat stream closed for showtime %s", showtime_id)


@router.get("/{showtime_id}/seats/stream")
def stream_seat_changes(showtime_id: UUID, db: Session = Depends(get_db)):
    """
    Push a signal whenever seats of this showtime are booked or released.

    Best effort: the stream may miss changes, so clients refresh the seat
    map after every event and after reconnecting.
    """
    load_showtime(db, showtime_id)
    # Don't pin a pooled connection for the life of the stream
    db.close()
    return EventSourceResponse(
        seat_change_events(showtime_id),
        ping=settings.SSE_PING_SECONDS,
    )

import asyncio
import uuid

from app.api.v1.public.showtimes import seat_change_events
from app.core.feed import AvailabilityFeed


def test_publish_reaches_only_matching_showtime():
    feed = AvailabilityFeed()
    watched, other = uuid.uuid4(), uuid.uuid4()
    calls = []
    feed.register(watched, calls.append)

    assert feed.publish(other) == 0
    assert feed.publish(watched) == 1
    assert calls == [watched]


def test_unregister_stops_delivery():
    feed = AvailabilityFeed()
    showtime_id = uuid.uuid4()
    calls = []
    subscription = feed.register(showtime_id, calls.append)

    assert feed.unregister(subscription) is True
    assert feed.unregister(subscription) is False
    feed.publish(showtime_id)

    assert calls == []
    assert feed.subscriber_count(showtime_id) == 0


def test_every_viewer_is_notified():
    feed = AvailabilityFeed()
    showtime_id = uuid.uuid4()
    first, second = [], []
    a = feed.register(showtime_id, first.append)
    b = feed.register(showtime_id, second.append)

    assert a.token != b.token
    assert feed.subscriber_count(showtime_id) == 2
    feed.publish(showtime_id)

    assert first == second == [showtime_id]


def test_failing_handler_does_not_block_others(caplog):
    feed = AvailabilityFeed()
    showtime_id = uuid.uuid4()
    calls = []

    def broken(_):
        raise RuntimeError("client went away")

    feed.register(showtime_id, broken)
    feed.register(showtime_id, calls.append)

    assert feed.publish(showtime_id) == 1
    assert calls == [showtime_id]
    assert "Seat feed handler failed" in caplog.text


def test_stream_sends_ready_then_coalesced_changes():
    feed = AvailabilityFeed()
    showtime_id = uuid.uuid4()

    async def scenario():
        events = seat_change_events(showtime_id, feed)

        ready = await events.__anext__()
        assert ready["event"] == "ready"
        assert str(showtime_id) in ready["data"]
        assert feed.subscriber_count(showtime_id) == 1

        # Commits happen on worker threads
        await asyncio.to_thread(feed.publish, showtime_id)
        await asyncio.to_thread(feed.publish, showtime_id)

        changed = await asyncio.wait_for(events.__anext__(), timeout=1)
        assert changed["event"] == "seats_changed"

        # Both signals were folded into the single event above
        timed_out = False
        try:
            await asyncio.wait_for(events.__anext__(), timeout=0.1)
        except asyncio.TimeoutError:
            timed_out = True
        assert timed_out

        await events.aclose()

    asyncio.run(scenario())
    assert feed.subscriber_count(showtime_id) == 0


def test_closing_the_stream_unregisters():
    feed = AvailabilityFeed()
    showtime_id = uuid.uuid4()

    async def scenario():
        events = seat_change_events(showtime_id, feed)
        await events.__anext__()
        assert feed.subscriber_count(showtime_id) == 1
        await events.aclose()

    asyncio.run(scenario())
    assert feed.subscriber_count(showtime_id) == 0

"""Tests for dynaform.notifications module."""

import asyncio

from dynaform import NotificationChannel, NotificationThrottle, NotificationType
from dynaform.notifications import EventKind


def test_throttle_cooldown():
    """Test a second error within the cooldown is suppressed."""
    throttle = NotificationThrottle()
    t = 1_000_000

    assert throttle.should_notify("email", t)
    assert not throttle.should_notify("email", t + 1000)
    assert not throttle.should_notify("email", t + 3000)
    assert throttle.should_notify("email", t + 3001)


def test_throttle_suppressed_call_does_not_record():
    """Test only fired notifications move the cooldown window."""
    throttle = NotificationThrottle(cooldown_ms=100)

    throttle.should_notify("a", 0)
    throttle.should_notify("a", 50)

    assert throttle.last_fired("a") == 0
    assert throttle.should_notify("a", 101)
    assert throttle.last_fired("a") == 101


def test_throttle_is_per_field():
    """Test fields do not share a cooldown."""
    throttle = NotificationThrottle()

    assert throttle.should_notify("email", 0)
    assert throttle.should_notify("name", 10)


def test_throttle_cooldown_override_and_clear():
    """Test a per-call cooldown and forgetting history."""
    throttle = NotificationThrottle()

    throttle.should_notify("a", 0)
    assert throttle.should_notify("a", 600, cooldown_ms=500)

    throttle.clear("a")
    assert throttle.last_fired("a") is None
    assert throttle.should_notify("a", 601)

    throttle.clear()
    assert throttle.last_fired("a") is None


def test_channel_ids_are_monotonic(clock):
    """Test every notification gets the next id."""
    channel = NotificationChannel(clock=clock)

    first = channel.show_success("uno")
    second = channel.show_error("dos")
    third = channel.show_info("tres")

    assert [first.id, second.id, third.id] == [1, 2, 3]
    assert second.type is NotificationType.ERROR
    assert second.timeout_ms == 6000
    assert first.created_at_ms == clock.now
    assert [n.id for n in channel.active] == [1, 2, 3]
    assert len(channel) == 3


def test_channel_events_in_order(clock):
    """Test drain returns add and remove events in order, then empties."""
    channel = NotificationChannel(clock=clock)
    a = channel.push(NotificationType.INFO, "a")
    channel.push(NotificationType.INFO, "b")
    channel.remove(a.id)

    events = channel.drain()

    assert [(e.kind, e.id) for e in events] == [
        (EventKind.ADDED, 1),
        (EventKind.ADDED, 2),
        (EventKind.REMOVED, 1),
    ]
    assert events[0].notification.message == "a"
    assert channel.drain() == []


def test_remove_unknown_is_noop(clock):
    """Test removing an id that is not shown emits nothing."""
    channel = NotificationChannel(clock=clock)
    n = channel.push(NotificationType.INFO, "a")
    assert channel.remove(n.id)
    channel.drain()

    assert not channel.remove(n.id)
    assert not channel.remove(99)
    assert channel.drain() == []


def test_expire(clock):
    """Test expire removes only notifications whose timeout elapsed."""
    channel = NotificationChannel(clock=clock)
    short = channel.show_success("corta", timeout_ms=1000)
    long = channel.show_error("larga", timeout_ms=5000)
    sticky = channel.push(NotificationType.INFO, "fija")

    clock.advance(1000)
    assert channel.expire() == [short.id]

    assert channel.expire(clock.now + 10_000) == [long.id]
    assert [n.id for n in channel.active] == [sticky.id]


def test_clear(clock):
    """Test clear removes every shown notification."""
    channel = NotificationChannel(clock=clock)
    channel.push(NotificationType.INFO, "a")
    channel.push(NotificationType.INFO, "b")
    channel.drain()

    channel.clear()

    assert channel.active == []
    assert [e.kind for e in channel.drain()] == [EventKind.REMOVED, EventKind.REMOVED]


def test_injected_scheduler(clock):
    """Test auto-dismiss goes through the injected scheduler."""
    scheduled = []
    channel = NotificationChannel(
        clock=clock, scheduler=lambda delay, callback: scheduled.append((delay, callback))
    )

    n = channel.show_success("ok", timeout_ms=2500)
    channel.push(NotificationType.INFO, "fija")

    assert len(scheduled) == 1
    delay, callback = scheduled[0]
    assert delay == 2.5
    callback()
    assert n.id not in [x.id for x in channel.active]
    # closing again after the timer fired does nothing
    assert not channel.remove(n.id)


def test_event_loop_auto_dismiss():
    """Test notifications schedule their own removal on a running loop."""

    async def scenario():
        channel = NotificationChannel()
        channel.show_success("ok", timeout_ms=10)
        assert len(channel) == 1
        await asyncio.sleep(0.05)
        return len(channel)

    assert asyncio.run(scenario()) == 0


def test_notification_to_dict(clock):
    """Test the renderer-facing dict form."""
    channel = NotificationChannel(clock=clock)
    n = channel.show_error("mal", timeout_ms=100)

    assert n.to_dict() == {"id": 1, "type": "error", "message": "mal", "timeoutMs": 100}

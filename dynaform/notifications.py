"""Notification channel and per-field error throttle.

The channel is an explicit append/remove event queue: every notification
shown produces an ``added`` event and every removal a ``removed`` event,
in the order they happened. A renderer drains the queue to update the
screen. Removing an id that is not shown is a no-op, so an auto-dismiss
that fires after the user closed the notification does nothing.
"""

import asyncio
import functools
import logging
import time
import typing
from collections import deque
from enum import Enum

from .options import NotificationType

logger = logging.getLogger(__name__)

Clock = typing.Callable[[], int]
"""Returns the current time in epoch milliseconds."""

Scheduler = typing.Callable[[float, typing.Callable[[], typing.Any]], typing.Any]
"""Runs a callback after a delay given in seconds."""


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return time.time_ns() // 1_000_000


class Notification(typing.NamedTuple):
    """A user-visible notification.

    Attributes:
        id: Session-scoped, monotonically increasing identifier
        type: Success, error or info
        message: Text to show
        timeout_ms: Auto-dismiss delay, 0 for sticky notifications
        created_at_ms: Time the notification was shown
    """

    id: int
    type: NotificationType
    message: str
    timeout_ms: int
    created_at_ms: int

    def to_dict(self) -> dict[str, typing.Any]:
        return {
            "id": self.id,
            "type": self.type.value,
            "message": self.message,
            "timeoutMs": self.timeout_ms,
        }


class EventKind(str, Enum):
    ADDED = "added"
    REMOVED = "removed"


class NotificationEvent(typing.NamedTuple):
    """One change to the list of shown notifications.

    Attributes:
        kind: ADDED or REMOVED
        id: Notification id
        notification: The notification, for ADDED events only
    """

    kind: EventKind
    id: int
    notification: Notification | None = None


class NotificationChannel:
    """Ordered queue of notification add/remove events."""

    def __init__(
        self,
        *,
        clock: Clock | None = None,
        scheduler: Scheduler | None = None,
    ) -> None:
        """Initialize NotificationChannel.

        Args:
            clock: Time source in epoch milliseconds
            scheduler: Function(delay_seconds, callback) used for auto-dismiss.
                When None, the running asyncio loop is used if there is one;
                otherwise removal happens through :meth:`expire`.
        """
        self._clock = clock or now_ms
        self._scheduler = scheduler
        self._id_counter = 0
        self._active: dict[int, Notification] = {}
        self._events: deque[NotificationEvent] = deque()

    @property
    def active(self) -> list[Notification]:
        """Notifications currently shown, oldest first."""
        return list(self._active.values())

    def __len__(self) -> int:
        return len(self._active)

    def push(
        self, type: NotificationType, message: str, timeout_ms: int = 0
    ) -> Notification:
        """Show a notification.

        Args:
            type: Notification type
            message: Text to show
            timeout_ms: Auto-dismiss delay, 0 to keep it until removed

        Returns:
            The notification that was queued
        """
        self._id_counter += 1
        notification = Notification(
            id=self._id_counter,
            type=NotificationType(type),
            message=message,
            timeout_ms=timeout_ms,
            created_at_ms=self._clock(),
        )
        self._active[notification.id] = notification
        self._events.append(
            NotificationEvent(EventKind.ADDED, notification.id, notification)
        )
        logger.debug(
            "Notification %d (%s): %s", notification.id, notification.type.value, message
        )
        if timeout_ms > 0:
            self._schedule_removal(notification)
        return notification

    def show_success(self, message: str, timeout_ms: int = 4000) -> Notification:
        return self.push(NotificationType.SUCCESS, message, timeout_ms)

    def show_error(self, message: str, timeout_ms: int = 6000) -> Notification:
        return self.push(NotificationType.ERROR, message, timeout_ms)

    def show_info(self, message: str, timeout_ms: int = 4000) -> Notification:
        return self.push(NotificationType.INFO, message, timeout_ms)

    def remove(self, notification_id: int) -> bool:
        """Remove a notification.

        Args:
            notification_id: Id of the notification

        Returns:
            True if it was shown, False if the call was a no-op
        """
        if self._active.pop(notification_id, None) is None:
            return False
        self._events.append(NotificationEvent(EventKind.REMOVED, notification_id))
        return True

    def clear(self) -> None:
        """Remove every shown notification."""
        for notification_id in list(self._active):
            self.remove(notification_id)

    def expire(self, at_ms: int | None = None) -> list[int]:
        """Remove notifications whose timeout has elapsed.

        Args:
            at_ms: Reference time, defaults to the channel clock

        Returns:
            Ids that were removed
        """
        at_ms = self._clock() if at_ms is None else at_ms
        due = [
            n.id
            for n in self._active.values()
            if n.timeout_ms > 0 and at_ms - n.created_at_ms >= n.timeout_ms
        ]
        for notification_id in due:
            self.remove(notification_id)
        return due

    def drain(self) -> list[NotificationEvent]:
        """Return queued events in order and empty the queue."""
        events = list(self._events)
        self._events.clear()
        return events

    def _schedule_removal(self, notification: Notification) -> None:
        callback = functools.partial(self.remove, notification.id)
        delay = notification.timeout_ms / 1000
        if self._scheduler is not None:
            self._scheduler(delay, callback)
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        loop.call_later(delay, callback)


class NotificationThrottle:
    """Per-field cooldown for error notifications.

    Each field key remembers when an error notification last fired for
    it. Success notifications never go through the throttle.
    """

    def __init__(self, cooldown_ms: int = 3000) -> None:
        self.cooldown_ms = cooldown_ms
        self._last_fired: dict[str, int] = {}

    def should_notify(
        self, field_key: str, now_ms: int, cooldown_ms: int | None = None
    ) -> bool:
        """Decide whether an error notification may fire now.

        Returns True, and records ``now_ms`` for the field, when the field
        has never fired or fired more than ``cooldown_ms`` ago.

        Args:
            field_key: Field the notification is about
            now_ms: Current time in epoch milliseconds
            cooldown_ms: Cooldown override for this call

        Returns:
            True if the notification should fire
        """
        cooldown = self.cooldown_ms if cooldown_ms is None else cooldown_ms
        last = self._last_fired.get(field_key)
        if last is not None and now_ms - last <= cooldown:
            logger.debug(
                "Suppressed error notification for %r (%d ms since last)",
                field_key,
                now_ms - last,
            )
            return False
        self._last_fired[field_key] = now_ms
        return True

    def last_fired(self, field_key: str) -> int | None:
        return self._last_fired.get(field_key)

    def clear(self, field_key: str | None = None) -> None:
        """Forget the history of one field, or of every field."""
        if field_key is None:
            self._last_fired.clear()
        else:
            self._last_fired.pop(field_key, None)

"""Subscription management for Store."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator

logger = logging.getLogger(__name__)

type Listener[S] = Callable[[S], None]
type Unsubscribe = Callable[[], None]


class Subscription[S]:
    """One registration of a listener.

    Registering the same callback twice gives two independent subscriptions.
    """

    __slots__ = ("callback", "active")

    callback: Listener[S]
    active: bool

    def __init__(self, callback: Listener[S]) -> None:
        self.callback = callback
        self.active = True


class Subscribers[S]:
    """Ordered listener registrations for a Store.

    Notification iterates over the registrations captured when the pass
    starts: listeners added during a pass wait for the next one, and
    listeners removed during a pass are skipped if not yet reached.
    """

    _subscriptions: list[Subscription[S]]

    def __init__(self) -> None:
        self._subscriptions = []

    def append(self, callback: Listener[S]) -> Subscription[S]:
        """Register a callback at the end of the notification order."""
        subscription = Subscription(callback)
        self._subscriptions.append(subscription)
        logger.debug("Subscribed %r (%d active)", callback, len(self._subscriptions))
        return subscription

    def remove(self, subscription: Subscription[S]) -> bool:
        """Remove exactly this registration.

        Returns:
            False if it was already removed, True otherwise
        """
        if not subscription.active:
            return False
        subscription.active = False
        # Match by identity so an equal callback registered elsewhere stays put.
        for position, candidate in enumerate(self._subscriptions):
            if candidate is subscription:
                del self._subscriptions[position]
                break
        logger.debug(
            "Unsubscribed %r (%d active)", subscription.callback, len(self._subscriptions)
        )
        return True

    def notify(self, current_state: Callable[[], S]) -> None:
        """Call every active listener with the current state, in subscription order.

        The state is read fresh for each listener, so if an earlier listener
        set state again, the listeners after it receive that newer value.

        A listener that raises aborts the pass; the exception propagates
        after being logged and later listeners are not called.
        """
        captured = tuple(self._subscriptions)
        logger.debug("Notifying %d listener(s)", len(captured))
        for subscription in captured:
            if not subscription.active:
                continue
            try:
                subscription.callback(current_state())
            except Exception:
                logger.error("Listener %r raised during notification", subscription.callback)
                raise

    def __iter__(self) -> Iterator[Listener[S]]:
        """Iterate over registered callbacks in notification order."""
        return iter([s.callback for s in self._subscriptions])

    def __len__(self) -> int:
        """Return number of active registrations."""
        return len(self._subscriptions)

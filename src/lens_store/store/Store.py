from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import Any

from lens_store.lens.Lens import Lens, over, view, write
from lens_store.store.Command import Command, CommandContext
from lens_store.store.Subscribers import Listener, Subscribers, Unsubscribe

logger = logging.getLogger(__name__)


class Store[S]:
    """Observable container for one immutable state value.

    The store never inspects the state itself. Callers pass lenses to say
    which slice to read or replace, and every write replaces the whole state
    and runs one notification pass before returning.

    All public operations hold a re-entrant lock for their full duration, so
    listeners and commands may call back into the store from the same thread.
    """

    _state: S
    _subscribers: Subscribers[S]
    _lock: threading.RLock

    def __init__(self, initial_state: S):
        self._state = initial_state
        self._subscribers = Subscribers()
        self._lock = threading.RLock()

    @property
    def listener_count(self) -> int:
        """Number of live registrations."""
        return len(self._subscribers)

    def listeners(self) -> tuple[Listener[S], ...]:
        """Registered callbacks in notification order, as a read-only snapshot."""
        with self._lock:
            return tuple(self._subscribers)

    def get_state(self) -> S:
        return self._state

    def set_state(self, new_state: S) -> None:
        """Replace the state unconditionally and notify every listener."""
        with self._lock:
            self._state = new_state
            logger.debug("State replaced with %s", type(new_state).__name__)
            self._subscribers.notify(self.get_state)

    def read_state[A](self, lens: Lens[S, A]) -> A:
        return view(self._state, lens)

    def write_state[A](self, lens: Lens[S, A], value: A) -> None:
        """Write a literal value at `lens`, even if that value is callable."""
        with self._lock:
            self.set_state(write(self._state, lens, value))

    def over_state[A](self, lens: Lens[S, A], fn: Callable[[A], A]) -> None:
        """Replace the focus of `lens` with `fn` applied to it."""
        with self._lock:
            self.set_state(over(self._state, lens, fn))

    def update_state[A](self, lens: Lens[S, A], data_or_fn: A | Callable[[A], A]) -> None:
        """Transform the focus when given a callable, otherwise write it as a literal.

        Use `write_state` to store a callable as the focus value.
        """
        if callable(data_or_fn):
            self.over_state(lens, data_or_fn)
        else:
            self.write_state(lens, data_or_fn)

    def subscribe(self, fn: Listener[S]) -> Unsubscribe:
        """Register `fn` to be called with the state after every write.

        Returns:
            A function removing this registration. Calling it again does nothing.
        """
        with self._lock:
            subscription = self._subscribers.append(fn)

        def unsubscribe() -> None:
            with self._lock:
                self._subscribers.remove(subscription)

        return unsubscribe

    def execute(self, command: Command[S], *args: Any, **kwargs: Any) -> Any:
        """Run a two-stage command against this store.

        `command(*args, **kwargs)` must return a function, which is called with
        a CommandContext bound to this store.

        Returns:
            Whatever the second stage returns

        Raises:
            TypeError: If the first stage does not return a callable
        """
        run = command(*args, **kwargs)
        if not callable(run):
            name = getattr(command, "__name__", repr(command))
            raise TypeError(
                f"Command {name} must return a callable taking a CommandContext, "
                f"got {type(run).__name__}"
            )
        with self._lock:
            return run(self._context)

    @property
    def _context(self) -> CommandContext[S]:
        return CommandContext(
            update_state=self.update_state,
            read_state=self.read_state,
            execute=self.execute,
        )


def create_store[S](initial_state: S) -> Store[S]:
    return Store(initial_state)

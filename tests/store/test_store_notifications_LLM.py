"""Tests for the notification pass: changes during a pass, re-entrancy and listener errors."""

from __future__ import annotations

import logging
from collections.abc import Callable

import pytest

from lens_store.store.Store import Store, create_store


def counter_store() -> Store[int]:
    return create_store(0)


class TestChangesDuringPass:
    """Subscribing and unsubscribing while listeners run."""

    def test_listener_added_during_pass_waits_for_next(self) -> None:
        """A listener subscribed mid-pass is not called until the next set_state."""
        store = counter_store()
        late_calls: list[int] = []

        def late(state: int) -> None:
            late_calls.append(state)

        def adder(_: int) -> None:
            if not late_calls and store.listener_count == 1:
                store.subscribe(late)

        store.subscribe(adder)
        store.set_state(1)
        assert late_calls == []

        store.set_state(2)
        assert late_calls == [2]

    def test_listener_removed_before_reached_is_skipped(self) -> None:
        """Unsubscribing a later listener mid-pass prevents its call."""
        store = counter_store()
        calls: list[str] = []
        handles: dict[str, Callable[[], None]] = {}

        def first(_: int) -> None:
            calls.append("first")
            handles["second"]()

        def second(_: int) -> None:
            calls.append("second")

        store.subscribe(first)
        handles["second"] = store.subscribe(second)
        store.set_state(1)

        assert calls == ["first"]

    def test_listener_removed_after_called_is_unaffected(self) -> None:
        """Unsubscribing an already-called listener doesn't disturb the pass."""
        store = counter_store()
        calls: list[str] = []
        handles: dict[str, Callable[[], None]] = {}

        def first(_: int) -> None:
            calls.append("first")

        def second(_: int) -> None:
            calls.append("second")
            handles["first"]()

        def third(_: int) -> None:
            calls.append("third")

        handles["first"] = store.subscribe(first)
        store.subscribe(second)
        store.subscribe(third)
        store.set_state(1)

        assert calls == ["first", "second", "third"]

    def test_self_unsubscribe(self) -> None:
        """A listener may unsubscribe itself while being notified."""
        store = counter_store()
        calls: list[int] = []
        handles: dict[str, Callable[[], None]] = {}

        def once(state: int) -> None:
            calls.append(state)
            handles["once"]()

        handles["once"] = store.subscribe(once)
        store.set_state(1)
        store.set_state(2)

        assert calls == [1]


class TestReentrancy:
    """set_state called from inside a listener."""

    def test_nested_set_state_runs_to_completion(self) -> None:
        """The nested pass finishes first; remaining outer listeners see the newer state."""
        store = counter_store()
        calls: list[tuple[str, int]] = []

        def bump(state: int) -> None:
            calls.append(("bump", state))
            if state == 1:
                store.set_state(2)

        def watch(state: int) -> None:
            calls.append(("watch", state))

        store.subscribe(bump)
        store.subscribe(watch)
        store.set_state(1)

        assert calls == [
            ("bump", 1),
            ("bump", 2),
            ("watch", 2),
            ("watch", 2),
        ]
        assert store.get_state() == 2


class TestListenerErrors:
    """A listener that raises aborts the rest of the pass."""

    def test_exception_propagates_and_aborts(self) -> None:
        """Later listeners are skipped and the error reaches the caller."""
        store = counter_store()
        calls: list[str] = []

        def failing(_: int) -> None:
            calls.append("failing")
            raise RuntimeError("listener failed")

        store.subscribe(lambda _: calls.append("before"))
        store.subscribe(failing)
        store.subscribe(lambda _: calls.append("after"))

        with pytest.raises(RuntimeError, match="listener failed"):
            store.set_state(1)

        assert calls == ["before", "failing"]

    def test_state_stays_committed(self) -> None:
        """The new state is kept even though notification failed."""
        store = counter_store()

        def failing(_: int) -> None:
            raise ValueError("nope")

        store.subscribe(failing)

        with pytest.raises(ValueError):
            store.set_state(5)

        assert store.get_state() == 5

    def test_failing_listener_is_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        """The failing listener is logged at ERROR before propagating."""
        store = counter_store()

        def failing(_: int) -> None:
            raise ValueError("nope")

        store.subscribe(failing)

        with caplog.at_level(logging.ERROR, logger="lens_store.store.Subscribers"):
            with pytest.raises(ValueError):
                store.set_state(1)

        assert any("raised during notification" in r.getMessage() for r in caplog.records)

    def test_store_usable_after_failure(self) -> None:
        """Removing the failing listener restores normal notification."""
        store = counter_store()
        received: list[int] = []

        def failing(_: int) -> None:
            raise ValueError("nope")

        unsubscribe = store.subscribe(failing)
        store.subscribe(received.append)

        with pytest.raises(ValueError):
            store.set_state(1)

        unsubscribe()
        store.set_state(2)

        assert received == [2]

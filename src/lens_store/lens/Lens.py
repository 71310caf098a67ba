from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from lens_store.lens.records import FieldName, get_field, with_field


@dataclass(frozen=True)
class Lens[S, A]:
    """A getter/setter pair focusing a part A of a larger immutable value S.

    S: The whole state type
    A: The focus type

    Lenses are plain values. The same lens can be shared by any number of
    stores or call sites. Every lens built by this module satisfies:

    - GetPut: setter(getter(s))(s) == s
    - PutGet: getter(setter(a)(s)) == a
    - PutPut: setter(a2)(setter(a1)(s)) == setter(a2)(s)

    Lenses made with `create` are trusted to uphold these laws themselves.
    """

    getter: Callable[[S], A]
    setter: Callable[[A], Callable[[S], S]]


def create[S, A](
    getter: Callable[[S], A], setter: Callable[[A], Callable[[S], S]]
) -> Lens[S, A]:
    """Wrap a getter and a curried setter into a Lens. No validation is done."""
    return Lens(getter, setter)


def view[S, A](state: S, lens: Lens[S, A]) -> A:
    return lens.getter(state)


def write[S, A](state: S, lens: Lens[S, A], value: A) -> S:
    """Return a new state with the focus of `lens` replaced by `value`."""
    return lens.setter(value)(state)


def over[S, A](state: S, lens: Lens[S, A], fn: Callable[[A], A]) -> S:
    """Return a new state with `fn` applied to the focus of `lens`."""
    return write(state, lens, fn(view(state, lens)))


def _identity_setter(_: Any) -> Callable[[Any], Any]:
    return lambda state: state


IDENTITY: Lens[Any, Any] = Lens(lambda state: state, _identity_setter)
"""Focuses the whole state. Writing through it leaves the state unchanged."""


def compose(*lenses: Lens[Any, Any]) -> Lens[Any, Any]:
    """Chain lenses, outermost first, into one lens from the outer state to the innermost focus.

    Args:
        *lenses: Lenses where each one focuses inside the previous one's focus

    Returns:
        IDENTITY for no lenses, the lens itself for one, otherwise a composite lens.
        Nothing is looked up until the composite is used.
    """
    count = len(lenses)
    if count == 0:
        return IDENTITY
    if count == 1:
        return lenses[0]

    def getter(state: Any) -> Any:
        focus = state
        for lens in lenses:
            focus = view(focus, lens)
        return focus

    def setter(value: Any) -> Callable[[Any], Any]:
        def traverse(state: Any, depth: int = 0) -> Any:
            # Each level patches its own local sub-state with the rebuilt child.
            if depth == count:
                return value
            lens = lenses[depth]
            return lens.setter(traverse(lens.getter(state), depth + 1))(state)

        return traverse

    return Lens(getter, setter)


def prop(name: FieldName) -> Lens[Any, Any]:
    """Lens focusing field `name` of a record (dict, dataclass, NamedTuple, list, tuple or object).

    The setter returns a shallow copy with only that field replaced; the
    original record is left untouched and all other fields are shared.
    """
    return Lens(
        lambda state: get_field(state, name),
        lambda value: lambda state: with_field(state, name, value),
    )


class L:
    """Namespace grouping the lens operations, e.g. `L.view(state, L.prop("count"))`."""

    Lens = Lens
    IDENTITY = IDENTITY

    create = staticmethod(create)
    view = staticmethod(view)
    write = staticmethod(write)
    over = staticmethod(over)
    compose = staticmethod(compose)
    prop = staticmethod(prop)

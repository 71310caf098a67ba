"""Field access for record-shaped state.

`prop` lenses read and replace a single named field without mutating the
record they were given. Each supported record shape gets a shallow copy with
one field swapped, so every untouched field is shared with the original:

- dict (subclass type preserved) and other Mappings
- NamedTuple instances
- dataclass instances, frozen or not; fields declared with init=False are
  set on a shallow copy instead, so they can't be written on frozen ones
- list and tuple, addressed by integer (or digit-string) index
- any other object, via attribute access on a shallow copy
"""

from __future__ import annotations

import copy
import dataclasses
from collections.abc import Mapping
from typing import Any

type FieldName = str | int


def _is_namedtuple(state: Any) -> bool:
    return isinstance(state, tuple) and hasattr(state, "_fields")


def _is_sequence(state: Any) -> bool:
    return isinstance(state, (list, tuple)) and not _is_namedtuple(state)


def _as_index(name: FieldName) -> int:
    """Digit strings address sequence slots when they come from a text path."""
    if isinstance(name, int):
        return name
    try:
        return int(name)
    except ValueError:
        raise TypeError(f"Sequence index must be an integer, got {name!r}") from None


def get_field(state: Any, name: FieldName) -> Any:
    """Read field `name` from `state`.

    Raises:
        KeyError, IndexError, AttributeError: If the field does not exist
    """
    if isinstance(state, Mapping):
        return state[name]
    if _is_sequence(state):
        return state[_as_index(name)]
    return getattr(state, str(name))


def with_field[R](state: R, name: FieldName, value: Any) -> R:
    """Return a shallow copy of `state` with field `name` set to `value`.

    `state` itself is never modified.
    """
    if isinstance(state, dict):
        updated = copy.copy(state)
        updated[name] = value
        return updated
    if isinstance(state, Mapping):
        return {**state, name: value}  # type: ignore[return-value]
    if _is_namedtuple(state):
        return state._replace(**{str(name): value})  # type: ignore[attr-defined]
    if isinstance(state, list):
        updated_list = list(state)
        updated_list[_as_index(name)] = value
        return updated_list  # type: ignore[return-value]
    if isinstance(state, tuple):
        slots = list(state)
        slots[_as_index(name)] = value
        return tuple(slots)  # type: ignore[return-value]
    if dataclasses.is_dataclass(state) and not isinstance(state, type):
        # Fields outside __init__ can't go through replace(); they are set on a copy below.
        non_init = {f.name for f in dataclasses.fields(state) if not f.init}
        if str(name) not in non_init:
            return dataclasses.replace(state, **{str(name): value})  # type: ignore[type-var]

    updated_obj = copy.copy(state)
    setattr(updated_obj, str(name), value)
    return updated_obj


def _require_slots(state: Any, position: int) -> list[Any] | tuple[Any, ...]:
    if not isinstance(state, (list, tuple)):
        raise TypeError(
            f"Slot {position} needs a list or tuple, got {type(state).__name__}"
        )
    return state


def get_slot(state: Any, position: int) -> Any:
    """Read slot `position` of a list or tuple (NamedTuples included)."""
    return _require_slots(state, position)[position]


def with_slot[R](state: R, position: int, value: Any) -> R:
    """Return a copy of a list or tuple with slot `position` replaced.

    NamedTuples keep their type.
    """
    slots = list(_require_slots(state, position))
    slots[position] = value
    if isinstance(state, list):
        return slots  # type: ignore[return-value]
    if _is_namedtuple(state):
        return type(state)._make(slots)  # type: ignore[attr-defined]
    return tuple(slots)  # type: ignore[return-value]

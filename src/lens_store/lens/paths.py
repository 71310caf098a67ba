"""Path lenses: deep focus from a dotted path or a list of field names.

Example:
    title = path("document.sections.0.title")
    state = write(state, title, "Introduction")

Text paths are split on dots with glom's `Path.from_text`. Segments stay
strings; list and tuple levels accept digit strings as indexes. There is no
escaping, so a key that itself contains a dot is only reachable through the
sequence form, e.g. `path(["hosts", "example.com"])`. Wildcards (`*`, `**`)
and empty segments are rejected.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from glom import Path

from lens_store.lens.Lens import Lens, compose, prop
from lens_store.lens.records import FieldName, get_slot, with_slot


def path_segments(spec: str | Sequence[FieldName]) -> tuple[FieldName, ...]:
    """Split a path spec into its field names.

    Args:
        spec: Dotted text like "a.b.0", or a sequence of field names

    Returns:
        The field names, outermost first. An empty string gives no segments.

    Raises:
        ValueError: If dotted text holds a wildcard or an empty segment
    """
    if not isinstance(spec, str):
        return tuple(spec)
    if spec == "":
        return ()
    segments = tuple(Path.from_text(spec).values())
    for segment in segments:
        # glom parses "*" and "**" into None
        if segment is None:
            raise ValueError(f"Wildcards are not supported in path {spec!r}")
        if segment == "":
            raise ValueError(f"Empty segment in path {spec!r}")
    return segments


def path(spec: str | Sequence[FieldName]) -> Lens[Any, Any]:
    """Compose one `prop` lens per segment of `spec`."""
    return compose(*(prop(segment) for segment in path_segments(spec)))


def index(position: int) -> Lens[Any, Any]:
    """Lens focusing slot `position` of a list or tuple.

    Unlike `prop`, other state shapes raise TypeError on use.
    """
    if isinstance(position, bool) or not isinstance(position, int):
        raise TypeError(f"index() expects an int, got {type(position).__name__}")
    return Lens(
        lambda state: get_slot(state, position),
        lambda value: lambda state: with_slot(state, position, value),
    )

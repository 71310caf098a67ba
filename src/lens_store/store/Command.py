from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from lens_store.lens.Lens import Lens

# A command is a plain two-stage function: args -> (context -> result)
type Command[S] = Callable[..., Callable[[CommandContext[S]], Any]]


@dataclass(frozen=True)
class CommandContext[S]:
    """Capabilities handed to the second stage of a command by `Store.execute`.

    S: The state type

    Commands can read and update state through lenses and dispatch further
    commands, but never see the store itself or its listeners.

    Example:
        def add(amount: int) -> Callable[[CommandContext[AppState]], None]:
            def run(ctx: CommandContext[AppState]) -> None:
                ctx.update_state(count_lens, lambda c: c + amount)
            return run

        store.execute(add, 5)
    """

    update_state: Callable[[Lens[S, Any], Any], None]
    read_state: Callable[[Lens[S, Any]], Any]
    execute: Callable[..., Any]

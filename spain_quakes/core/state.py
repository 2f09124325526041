"""Display state and its reducer - Pure functions.

The page state is an immutable DisplayState. Every change goes through
``reduce(state, action)``, which returns a new state and never does I/O.
The presenter owns the single live instance.

Each fetch carries a generation number. A completion whose generation is
older than the most recently started fetch is dropped, so a slow earlier
request can never overwrite the result of a later refresh.
"""

from dataclasses import dataclass, replace
from datetime import datetime

from spain_quakes.core.earthquake import Earthquake


@dataclass(frozen=True)
class DisplayState:
    """State of one table session.

    Attributes:
        events: Events from the last successful fetch
        is_loading: True while a fetch is in flight
        error_message: Message of the last failed fetch, if any
        filter_spain: Only show events whose place mentions Spain
        last_update: Completion time of the last successful fetch
        fetch_generation: Generation of the most recently started fetch
    """
    events: tuple[Earthquake, ...] = ()
    is_loading: bool = True
    error_message: str | None = None
    filter_spain: bool = False
    last_update: datetime | None = None
    fetch_generation: int = 0


@dataclass(frozen=True)
class FetchStarted:
    generation: int


@dataclass(frozen=True)
class FetchSucceeded:
    generation: int
    events: tuple[Earthquake, ...]
    completed_at: datetime


@dataclass(frozen=True)
class FetchFailed:
    generation: int
    message: str


@dataclass(frozen=True)
class FilterToggled:
    pass


Action = FetchStarted | FetchSucceeded | FetchFailed | FilterToggled


def is_stale(state: DisplayState, generation: int) -> bool:
    """Check whether a fetch result has been superseded.

    Pure function.
    """
    return generation < state.fetch_generation


def reduce(state: DisplayState, action: Action) -> DisplayState:
    """Apply an action to the display state.

    Pure function.

    Args:
        state: Current state
        action: Action to apply

    Returns:
        New DisplayState (the same object when the action is ignored)

    Raises:
        TypeError: If the action type is unknown
    """
    if isinstance(action, FetchStarted):
        return replace(
            state,
            is_loading=True,
            error_message=None,
            fetch_generation=max(action.generation, state.fetch_generation),
        )

    if isinstance(action, FetchSucceeded):
        if is_stale(state, action.generation):
            return state
        return replace(
            state,
            events=tuple(action.events),
            is_loading=False,
            error_message=None,
            last_update=action.completed_at,
        )

    if isinstance(action, FetchFailed):
        if is_stale(state, action.generation):
            return state
        return replace(
            state,
            is_loading=False,
            error_message=action.message,
        )

    if isinstance(action, FilterToggled):
        return replace(state, filter_spain=not state.filter_spain)

    raise TypeError(f"Unknown action: {action!r}")

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar, Union

from inventory_desk.core.errors import DeskError

T = TypeVar("T")


@dataclass(frozen=True)
class Loading:
    pass


@dataclass(frozen=True)
class Loaded(Generic[T]):
    data: T


@dataclass(frozen=True)
class Failed:
    error: DeskError


LoadState = Union[Loading, Loaded[T], Failed]
StateListener = Callable[[LoadState], None]


def load(fetch: Callable[[], T], on_state: StateListener | None = None) -> Loaded[T] | Failed:
    """Run a view's fetch and tag the outcome instead of raising.

    ``on_state`` sees ``Loading`` first, then the final state.
    """
    if on_state is not None:
        on_state(Loading())
    state: Loaded[T] | Failed
    try:
        state = Loaded(fetch())
    except DeskError as error:
        state = Failed(error)
    if on_state is not None:
        on_state(state)
    return state

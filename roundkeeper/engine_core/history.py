"""
History - Undo/redo around any reducer.

undoable() turns a (state, action) -> state function into a
(HistoryState, action) -> HistoryState function:
- UNDO / REDO shift states between past, present and future
- Other actions run the inner reducer; a changed present is recorded
- Actions listed in skip_history replace the present without a record
- A reducer that returns its input object unchanged records nothing

GameStore owns one HistoryState and exposes dispatch().
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from typing import Callable, Generic, Iterable, TypeVar

from .action import Action, ActionType
from .reducer import Reducer
from .state import GameState, default_state


S = TypeVar("S")


@dataclass(frozen=True)
class HistoryState(Generic[S]):
    """
    Past, present and future states.

    past is oldest first, future is nearest first.
    """
    present: S
    past: tuple[S, ...] = ()
    future: tuple[S, ...] = ()

    @property
    def can_undo(self) -> bool:
        return len(self.past) > 0

    @property
    def can_redo(self) -> bool:
        return len(self.future) > 0


def undo(history: HistoryState[S]) -> HistoryState[S]:
    """Step back one state. No-op with an empty past."""
    if not history.past:
        return history
    return HistoryState(
        present=history.past[-1],
        past=history.past[:-1],
        future=(history.present,) + history.future,
    )


def redo(history: HistoryState[S]) -> HistoryState[S]:
    """Step forward one state. No-op with an empty future."""
    if not history.future:
        return history
    return HistoryState(
        present=history.future[0],
        past=history.past + (history.present,),
        future=history.future[1:],
    )


def undoable(
    reducer: Callable[[S, Action], S],
    skip_history: Iterable[ActionType] = (),
    limit: int | None = None,
) -> Callable[[HistoryState[S], Action], HistoryState[S]]:
    """
    Wrap a reducer with undo/redo.

    Args:
        reducer: Inner transition function
        skip_history: Action types that update the present without
            an undo record
        limit: Maximum length of the past stack; oldest entries drop

    Returns:
        Reducer over HistoryState
    """
    skipped = frozenset(skip_history)

    def history_reducer(history: HistoryState[S], action: Action) -> HistoryState[S]:
        if action.action_type == ActionType.UNDO:
            return undo(history)
        if action.action_type == ActionType.REDO:
            return redo(history)

        present = reducer(history.present, action)
        if present is history.present:
            return history

        if action.action_type in skipped:
            return replace(history, present=present)

        past = history.past + (history.present,)
        if limit is not None and len(past) > limit:
            past = past[len(past) - limit:]
        return HistoryState(present=present, past=past, future=())

    return history_reducer


class GameStore:
    """
    Owns the history-wrapped state of one game session.

    Usage:
        store = GameStore()
        store.dispatch(AddPlayer(name="Ann", color="red"))
        store.dispatch(StartRound(timestamp=time.time()))
        store.dispatch(Undo())
        store.state  # present GameState
    """

    def __init__(
        self,
        initial_state: GameState | None = None,
        reducer: Callable[[GameState, Action], GameState] | None = None,
        skip_history: Iterable[ActionType] = (),
        history_limit: int | None = None,
    ):
        self._reduce = undoable(
            reducer or Reducer(),
            skip_history=skip_history,
            limit=history_limit,
        )
        self._history: HistoryState[GameState] = HistoryState(
            present=initial_state if initial_state is not None else default_state()
        )

    @property
    def history(self) -> HistoryState[GameState]:
        return self._history

    @property
    def state(self) -> GameState:
        """The present state."""
        return self._history.present

    @property
    def can_undo(self) -> bool:
        return self._history.can_undo

    @property
    def can_redo(self) -> bool:
        return self._history.can_redo

    def dispatch(self, action: Action) -> GameState:
        """Apply an action and return the new present state."""
        self._history = self._reduce(self._history, action)
        return self._history.present

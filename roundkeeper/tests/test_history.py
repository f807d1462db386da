"""
Tests for the undo/redo history wrapper and GameStore.
"""

import pytest

from ..engine_core.action import (
    ActionType,
    BlurPlayer,
    EndPlayerTurn,
    FocusPlayer,
    Redo,
    StartRound,
    Undo,
    UpdatePlayerScore,
)
from ..engine_core.history import GameStore, HistoryState, undoable
from ..engine_core.reducer import Reducer
from ..engine_core.state import TurnKind


GAME_ACTIONS = [
    StartRound(timestamp=0),
    EndPlayerTurn(timestamp=10, kind=TurnKind.ACTION),
    UpdatePlayerScore("P2", "vp", 3),
    EndPlayerTurn(timestamp=20, kind=TurnKind.PASS),
    EndPlayerTurn(timestamp=30, kind=TurnKind.PASS),
    StartRound(timestamp=40),
]


class TestUndoRedo:
    """Tests for stack shifting."""

    def test_initial_history_is_empty(self, store):
        assert store.history.past == ()
        assert store.history.future == ()
        assert not store.can_undo
        assert not store.can_redo

    def test_dispatch_records_past(self, store, three_player_state):
        store.dispatch(StartRound(timestamp=0))

        assert store.history.past == (three_player_state,)
        assert store.state.active_round_index == 0

    def test_undo_restores_previous(self, store, three_player_state):
        store.dispatch(StartRound(timestamp=0))
        started = store.state
        store.dispatch(Undo())

        assert store.state is three_player_state
        assert store.history.future == (started,)

    def test_redo_reapplies(self, store):
        store.dispatch(StartRound(timestamp=0))
        started = store.state
        store.dispatch(Undo())
        store.dispatch(Redo())

        assert store.state is started
        assert store.history.future == ()

    def test_undo_with_empty_past_is_noop(self, store):
        before = store.history
        store.dispatch(Undo())

        assert store.history is before

    def test_redo_with_empty_future_is_noop(self, store):
        store.dispatch(StartRound(timestamp=0))
        before = store.history
        store.dispatch(Redo())

        assert store.history is before

    def test_new_action_clears_future(self, store):
        store.dispatch(StartRound(timestamp=0))
        store.dispatch(EndPlayerTurn(timestamp=5, kind=TurnKind.ACTION))
        store.dispatch(Undo())
        assert store.can_redo

        store.dispatch(EndPlayerTurn(timestamp=6, kind=TurnKind.PASS))
        assert not store.can_redo

    def test_future_is_nearest_first(self, store):
        states = []
        for action in GAME_ACTIONS[:3]:
            states.append(store.dispatch(action))
        store.dispatch(Undo())
        store.dispatch(Undo())

        assert store.history.future == (states[1], states[2])

    def test_inverse_law(self, store, three_player_state):
        """n undos return to the start, n redos return to the end."""
        for action in GAME_ACTIONS:
            store.dispatch(action)
        final = store.state

        for _ in GAME_ACTIONS:
            store.dispatch(Undo())
        assert store.state == three_player_state

        for _ in GAME_ACTIONS:
            store.dispatch(Redo())
        assert store.state == final


class TestNoOpActions:
    """A reducer returning its input must not add history."""

    def test_noop_not_recorded(self, store):
        store.dispatch(EndPlayerTurn(timestamp=1, kind=TurnKind.ACTION))

        assert not store.can_undo

    def test_noop_keeps_future(self, store):
        store.dispatch(StartRound(timestamp=0))
        store.dispatch(Undo())
        store.dispatch(EndPlayerTurn(timestamp=1, kind=TurnKind.ACTION))

        assert store.can_redo


class TestSkipHistory:
    """Actions listed in skip_history replace present only."""

    def test_skipped_action_not_undoable(self, three_player_state):
        store = GameStore(
            initial_state=three_player_state,
            skip_history=[ActionType.FOCUS_PLAYER, ActionType.BLUR_PLAYER],
        )
        store.dispatch(StartRound(timestamp=0))
        store.dispatch(FocusPlayer("P3"))

        assert store.state.focused_player_id == "P3"
        assert len(store.history.past) == 1

        store.dispatch(BlurPlayer())
        assert store.state.focused_player_id is None
        assert len(store.history.past) == 1

    def test_skipped_action_keeps_future(self, three_player_state):
        store = GameStore(
            initial_state=three_player_state,
            skip_history=[ActionType.FOCUS_PLAYER],
        )
        store.dispatch(StartRound(timestamp=0))
        store.dispatch(Undo())
        store.dispatch(FocusPlayer("P1"))

        assert store.can_redo
        assert store.state.focused_player_id == "P1"


class TestLimit:

    def test_past_is_capped(self, three_player_state):
        store = GameStore(initial_state=three_player_state, history_limit=2)
        for action in GAME_ACTIONS[:4]:
            store.dispatch(action)

        assert len(store.history.past) == 2


class TestGenericWrapper:
    """undoable() works with any reducer."""

    def test_wraps_plain_function(self):
        def counter(state, action):
            if action.action_type == ActionType.START_ROUND:
                return state + 1
            return state

        reduce = undoable(counter)
        history = HistoryState(present=0)
        history = reduce(history, StartRound(timestamp=0))
        history = reduce(history, StartRound(timestamp=1))
        assert history.present == 2
        assert history.past == (0, 1)

        history = reduce(history, Undo())
        assert history.present == 1
        assert history.future == (2,)

    @pytest.mark.parametrize("action", [Undo(), Redo()])
    def test_history_actions_skip_inner_reducer(self, action):
        calls = []

        def spy(state, action):
            calls.append(action)
            return state

        undoable(spy)(HistoryState(present="s", past=("p",), future=("f",)), action)
        assert calls == []

    def test_store_accepts_custom_reducer(self, three_player_state):
        store = GameStore(initial_state=three_player_state, reducer=Reducer())
        store.dispatch(StartRound(timestamp=0))

        assert store.can_undo

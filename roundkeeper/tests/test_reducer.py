"""
Tests for the reducer (state transitions).

Tests:
- Round start and turn handover
- Passing and round closure
- Next-round order from pass order
- Roster and score updates
- No-op handling of stale actions
"""

import pytest

from ..engine_core import selectors
from ..engine_core.state import GameState, Round, TurnKind, default_state
from ..engine_core.action import (
    AddPlayer,
    BlurPlayer,
    EndPlayerTurn,
    FocusPlayer,
    Reset,
    StartRound,
    UpdatePlayerScore,
)
from ..engine_core.reducer import Reducer, apply_action


ACTION = TurnKind.ACTION
REACTION = TurnKind.REACTION
PASS = TurnKind.PASS


def play(state: GameState, *steps) -> GameState:
    """Apply (timestamp, kind) turn ends in sequence."""
    for timestamp, kind in steps:
        state = apply_action(state, EndPlayerTurn(timestamp=timestamp, kind=kind))
    return state


def assert_turn_order_invariant(state: GameState):
    turn = selectors.active_turn(state)
    if turn is None:
        return
    round_ = selectors.active_round(state)
    assert turn.player_id == round_.player_order[state.active_player_index]


class TestStartRound:
    """Tests for START_ROUND."""

    def test_opens_turn_for_first_player(self, three_player_state):
        """Starting a round opens a turn for the first player in order."""
        state = apply_action(three_player_state, StartRound(timestamp=0))

        turn = selectors.active_turn(state)
        assert turn is not None
        assert turn.player_id == "P1"
        assert turn.start_time == 0
        assert turn.round_index == 0
        assert state.active_round_index == 0
        assert state.active_player_index == 0

    def test_promotes_trailing_round(self, three_player_state):
        """The trailing round starts and a new empty one is appended."""
        state = apply_action(three_player_state, StartRound(timestamp=5))

        assert len(state.rounds) == 2
        assert state.rounds[0].start_time == 5
        assert state.rounds[0].end_time is None
        assert state.rounds[1] == Round()

    def test_ignored_while_round_in_progress(self, three_player_state):
        """A second START_ROUND during a round changes nothing."""
        state = apply_action(three_player_state, StartRound(timestamp=0))
        again = apply_action(state, StartRound(timestamp=3))

        assert again is state

    def test_ignored_without_players(self, empty_state):
        """No players means no first turn, so nothing happens."""
        state = apply_action(empty_state, StartRound(timestamp=0))

        assert state is empty_state

    def test_next_round_index_advances(self, three_player_state):
        state = three_player_state
        assert selectors.next_round_index(state) == 0

        state = apply_action(state, StartRound(timestamp=0))
        assert selectors.next_round_index(state) == 1


class TestEndPlayerTurn:
    """Tests for END_PLAYER_TURN."""

    def test_scenario_three_players(self, three_player_state):
        """Walks the reference 3-player round."""
        state = apply_action(three_player_state, StartRound(timestamp=0))
        assert selectors.active_turn(state).player_id == "P1"

        state = play(state, (10, ACTION))
        assert state.turns[0].end_time == 10
        assert state.turns[0].kind == ACTION
        assert selectors.active_turn(state).player_id == "P2"
        assert state.active_player_index == 1

        state = play(state, (20, PASS))
        assert selectors.next_round(state).player_order == ("P2",)
        assert selectors.active_turn(state).player_id == "P3"
        assert selectors.active_turn(state).start_time == 20

        state = play(state, (30, PASS))
        assert selectors.next_round(state).player_order == ("P2", "P3")
        assert state.rounds[0].end_time == 30
        assert state.active_player_index == 0
        assert selectors.active_turn(state) is None
        assert state.rounds[1].start_time is None

    def test_noop_without_open_turn(self, three_player_state):
        """Ending a turn before the game starts returns the same state."""
        state = apply_action(three_player_state, EndPlayerTurn(timestamp=1, kind=ACTION))

        assert state is three_player_state

    def test_noop_between_rounds(self, three_player_state):
        """After the round ends there is no open turn to close."""
        state = apply_action(three_player_state, StartRound(timestamp=0))
        state = play(state, (10, PASS), (20, PASS))
        assert state.rounds[0].end_time == 20

        again = apply_action(state, EndPlayerTurn(timestamp=25, kind=ACTION))
        assert again is state

    def test_passed_player_keeps_turns(self, three_player_state):
        """Passing does not remove the player from the rotation."""
        state = apply_action(three_player_state, StartRound(timestamp=0))
        state = play(state, (1, PASS), (2, ACTION), (3, ACTION))

        assert selectors.active_turn(state).player_id == "P1"
        assert selectors.has_active_player_passed(state)
        assert selectors.suggested_turn_kind(state) == REACTION

    def test_second_pass_not_recorded_again(self, three_player_state):
        """A player who already passed is not added to the order twice."""
        state = apply_action(three_player_state, StartRound(timestamp=0))
        state = play(state, (1, PASS), (2, ACTION), (3, ACTION), (4, PASS))

        assert selectors.next_round(state).player_order == ("P1",)
        assert state.rounds[0].end_time is None
        assert selectors.active_turn(state).player_id == "P2"

    def test_round_closes_after_all_but_one_pass(self):
        """For N players, N-1 distinct passes end the round."""
        from ..engine_core.state import Player

        ids = ["A", "B", "C", "D", "E"]
        state = GameState(
            players=tuple(Player(player_id=i, name=i, color=i) for i in ids),
            rounds=(Round(player_order=tuple(ids)),),
        )
        state = apply_action(state, StartRound(timestamp=0))

        t = 0
        for _ in range(len(ids) - 2):
            t += 1
            state = play(state, (t, PASS))
            assert state.rounds[0].end_time is None

        state = play(state, (t + 1, PASS))
        assert state.rounds[0].end_time == t + 1
        assert state.active_player_index == 0
        assert selectors.next_round(state).player_order == ("A", "B", "C", "D")

    def test_turn_order_invariant_holds(self, three_player_state):
        state = apply_action(three_player_state, StartRound(timestamp=0))
        steps = [(1, ACTION), (2, PASS), (3, ACTION), (4, REACTION), (5, ACTION), (6, PASS)]
        for step in steps:
            state = play(state, step)
            assert_turn_order_invariant(state)

    def test_single_player_round(self):
        """A solo player closes the round with their first pass."""
        state = apply_action(default_state(), AddPlayer(name="Solo", color="red", player_id="S"))
        state = apply_action(state, StartRound(timestamp=0))
        state = play(state, (5, ACTION))
        assert selectors.active_turn(state).player_id == "S"

        state = play(state, (9, PASS))
        assert state.rounds[0].end_time == 9
        assert selectors.next_round(state).player_order == ("S",)


class TestPassOrder:
    """Tests for next-round ordering."""

    def test_pass_order_propagates(self, three_player_state):
        """Passing C then A leaves B last: round 2 order is [C, A, B]."""
        state = apply_action(three_player_state, StartRound(timestamp=0))
        # P1 acts, P2 acts, P3 passes, P1 passes -> round ends
        state = play(state, (1, ACTION), (2, ACTION), (3, PASS), (4, PASS))
        assert state.rounds[0].end_time == 4

        state = apply_action(state, StartRound(timestamp=10))
        assert state.active_round_index == 1
        assert state.rounds[1].player_order == ("P3", "P1", "P2")
        assert selectors.active_turn(state).player_id == "P3"
        assert selectors.active_turn(state).round_index == 1

    def test_passes_reset_each_round(self, three_player_state):
        state = apply_action(three_player_state, StartRound(timestamp=0))
        state = play(state, (1, PASS), (2, PASS))
        state = apply_action(state, StartRound(timestamp=3))

        assert not selectors.has_player_passed(state, "P1")
        assert not selectors.has_player_passed(state, "P2")


class TestGameOver:
    """Tests for the final round."""

    def test_no_round_after_last(self, three_player_state):
        state = three_player_state._copy_with(max_rounds=2)
        t = 0
        for _ in range(2):
            state = apply_action(state, StartRound(timestamp=t))
            state = play(state, (t + 1, PASS), (t + 2, PASS))
            t += 10

        assert selectors.is_game_over(state)
        assert apply_action(state, StartRound(timestamp=t)) is state


class TestAddPlayer:
    """Tests for ADD_PLAYER."""

    def test_prepends_to_first_round(self, empty_state):
        state = apply_action(empty_state, AddPlayer(name="Ann", color="red", player_id="a"))
        state = apply_action(state, AddPlayer(name="Bob", color="blue", player_id="b"))

        assert [p.player_id for p in state.players] == ["a", "b"]
        assert state.rounds[0].player_order == ("b", "a")
        assert len(state.rounds) == 1

    def test_generates_unique_ids(self, empty_state):
        first = AddPlayer(name="Ann", color="red")
        second = AddPlayer(name="Ann", color="red")

        assert first.player_id != second.player_id

    def test_same_action_is_deterministic(self, empty_state):
        action = AddPlayer(name="Ann", color="red")

        assert apply_action(empty_state, action) == apply_action(empty_state, action)

    def test_ignored_after_game_start(self, seated_state):
        state = apply_action(seated_state, StartRound(timestamp=0))

        assert apply_action(state, AddPlayer(name="Late", color="pink")) is state

    def test_seated_state_matches_direct_construction(self, seated_state, three_player_state):
        assert seated_state.rounds == three_player_state.rounds
        assert [p.player_id for p in seated_state.players] == ["P3", "P2", "P1"]
        assert [p.player_id for p in selectors.seating_order(seated_state)] == ["P1", "P2", "P3"]


class TestScores:
    """Tests for UPDATE_PLAYER_SCORE."""

    def test_sets_category(self, three_player_state):
        state = apply_action(three_player_state, UpdatePlayerScore("P1", "vp", 7))

        assert state.get_player("P1").score == {"vp": 7}
        assert three_player_state.get_player("P1").score == {}

    def test_last_write_wins(self, three_player_state):
        state = apply_action(three_player_state, UpdatePlayerScore("P1", "vp", 7))
        state = apply_action(state, UpdatePlayerScore("P1", "vp", 3))

        assert state.get_player("P1").score == {"vp": 3}

    def test_idempotent(self, three_player_state):
        once = apply_action(three_player_state, UpdatePlayerScore("P2", "vp", 4))
        twice = apply_action(once, UpdatePlayerScore("P2", "vp", 4))

        assert twice.get_player("P2").score == once.get_player("P2").score
        assert twice is once

    def test_unknown_player_ignored(self, three_player_state):
        state = apply_action(three_player_state, UpdatePlayerScore("nobody", "vp", 1))

        assert state is three_player_state

    def test_score_record_is_read_only(self, three_player_state):
        state = apply_action(three_player_state, UpdatePlayerScore("P1", "vp", 7))
        score = state.get_player("P1").score

        with pytest.raises(TypeError):
            score["vp"] = 99
        assert state.get_player("P1").score == {"vp": 7}

    def test_states_are_hashable(self, three_player_state):
        state = apply_action(three_player_state, UpdatePlayerScore("P1", "vp", 7))
        same = apply_action(three_player_state, UpdatePlayerScore("P1", "vp", 7))

        assert hash(state) == hash(same)
        assert len({state, same, three_player_state}) == 2


class TestFocusAndReset:
    """Tests for FOCUS_PLAYER, BLUR_PLAYER and RESET."""

    def test_focus_and_blur(self, three_player_state):
        state = apply_action(three_player_state, FocusPlayer("P2"))
        assert state.focused_player_id == "P2"
        assert selectors.focused_player(state).name == "Ryan"

        state = apply_action(state, BlurPlayer())
        assert state.focused_player_id is None

    def test_focus_unknown_player_ignored(self, three_player_state):
        assert apply_action(three_player_state, FocusPlayer("zzz")) is three_player_state

    def test_blur_without_focus_ignored(self, three_player_state):
        assert apply_action(three_player_state, BlurPlayer()) is three_player_state

    def test_reset_returns_default(self, three_player_state):
        state = apply_action(three_player_state, StartRound(timestamp=0))
        state = apply_action(state, Reset())

        assert state == default_state()
        assert len(state.rounds) == 1


class TestDeterminism:
    """The reducer is a pure function of (state, action)."""

    @pytest.mark.parametrize("action", [
        StartRound(timestamp=0),
        EndPlayerTurn(timestamp=1, kind=PASS),
        UpdatePlayerScore("P3", "vp", 2),
        FocusPlayer("P1"),
        Reset(),
    ])
    def test_same_input_same_output(self, three_player_state, action):
        state = apply_action(three_player_state, StartRound(timestamp=0))

        assert Reducer()(state, action) == Reducer()(state, action)

"""
Pytest fixtures for Roundkeeper tests.
"""

import pytest

from ..engine_core.state import GameState, Player, Round, default_state
from ..engine_core.action import AddPlayer
from ..engine_core.reducer import apply_action
from ..engine_core.history import GameStore


@pytest.fixture
def empty_state() -> GameState:
    """Default state with no players."""
    return default_state()


@pytest.fixture
def three_player_state() -> GameState:
    """
    3 players P1, P2, P3 with first-round order [P1, P2, P3].

    Built directly so player IDs are readable in assertions.
    """
    players = (
        Player(player_id="P1", name="Sean", color="gray"),
        Player(player_id="P2", name="Ryan", color="red"),
        Player(player_id="P3", name="Alan", color="blue"),
    )
    return GameState(
        players=players,
        rounds=(Round(player_order=("P1", "P2", "P3")),),
    )


@pytest.fixture
def seated_state() -> GameState:
    """Same table as three_player_state, built through ADD_PLAYER."""
    state = default_state()
    for player_id, name, color in [
        ("P3", "Alan", "blue"),
        ("P2", "Ryan", "red"),
        ("P1", "Sean", "gray"),
    ]:
        state = apply_action(state, AddPlayer(name=name, color=color, player_id=player_id))
    return state


@pytest.fixture
def store(three_player_state: GameState) -> GameStore:
    """History-wrapped store for the 3-player table."""
    return GameStore(initial_state=three_player_state)

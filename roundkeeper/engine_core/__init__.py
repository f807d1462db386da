"""
Engine Core - Deterministic turn and round tracking with undo/redo.

The engine is the runtime that:
1. Holds the immutable GameState
2. Applies actions via the reducer
3. Derives active round/player/turn via selectors
4. Records past and future states for undo/redo
"""

from .state import (
    GameState,
    GamePhase,
    Player,
    Round,
    Score,
    Turn,
    TurnKind,
    DEFAULT_MAX_ROUNDS,
    default_state,
)
from .action import (
    Action,
    ActionType,
    GameAction,
    StartRound,
    EndPlayerTurn,
    AddPlayer,
    UpdatePlayerScore,
    FocusPlayer,
    BlurPlayer,
    Reset,
    Undo,
    Redo,
)
from .reducer import Reducer, apply_action
from .history import GameStore, HistoryState, undoable
from . import selectors

__all__ = [
    "GameState",
    "Score",
    "GamePhase",
    "Player",
    "Round",
    "Turn",
    "TurnKind",
    "DEFAULT_MAX_ROUNDS",
    "default_state",
    "Action",
    "ActionType",
    "GameAction",
    "StartRound",
    "EndPlayerTurn",
    "AddPlayer",
    "UpdatePlayerScore",
    "FocusPlayer",
    "BlurPlayer",
    "Reset",
    "Undo",
    "Redo",
    "Reducer",
    "apply_action",
    "GameStore",
    "HistoryState",
    "undoable",
    "selectors",
]

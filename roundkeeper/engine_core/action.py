"""
Action System - One record type per action kind.

Actions represent:
1. Clock actions (start round, end player turn)
2. Roster actions (add player, update score)
3. UI bookkeeping (focus, blur, reset)
4. History actions (undo, redo), handled by the history wrapper

All state changes flow through actions. Time-sensitive actions carry
their timestamp; the engine never reads the clock.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Union
import uuid

from .state import TurnKind


class ActionType(Enum):
    """Tags for every action kind."""
    # Clock actions
    START_ROUND = "start_round"
    END_PLAYER_TURN = "end_player_turn"

    # Roster actions
    ADD_PLAYER = "add_player"
    UPDATE_PLAYER_SCORE = "update_player_score"

    # UI bookkeeping
    FOCUS_PLAYER = "focus_player"
    BLUR_PLAYER = "blur_player"
    RESET = "reset"

    # History actions
    UNDO = "undo"
    REDO = "redo"


def new_player_id() -> str:
    """Generate a fresh, never-reused player ID."""
    return uuid.uuid4().hex


@dataclass(frozen=True)
class StartRound:
    """Promote the trailing round to active."""
    timestamp: float

    action_type: ClassVar[ActionType] = ActionType.START_ROUND


@dataclass(frozen=True)
class EndPlayerTurn:
    """Close the open turn with the given kind."""
    timestamp: float
    kind: TurnKind

    action_type: ClassVar[ActionType] = ActionType.END_PLAYER_TURN


@dataclass(frozen=True)
class AddPlayer:
    """
    Add a player before the first round.

    The ID is generated when the action is built so that applying
    the same action twice gives the same result.
    """
    name: str
    color: str
    faction_id: str | None = None
    player_id: str = field(default_factory=new_player_id)

    action_type: ClassVar[ActionType] = ActionType.ADD_PLAYER


@dataclass(frozen=True)
class UpdatePlayerScore:
    """Set one score category for a player (last write wins)."""
    player_id: str
    key: str
    value: float

    action_type: ClassVar[ActionType] = ActionType.UPDATE_PLAYER_SCORE


@dataclass(frozen=True)
class FocusPlayer:
    player_id: str

    action_type: ClassVar[ActionType] = ActionType.FOCUS_PLAYER


@dataclass(frozen=True)
class BlurPlayer:
    action_type: ClassVar[ActionType] = ActionType.BLUR_PLAYER


@dataclass(frozen=True)
class Reset:
    action_type: ClassVar[ActionType] = ActionType.RESET


@dataclass(frozen=True)
class Undo:
    action_type: ClassVar[ActionType] = ActionType.UNDO


@dataclass(frozen=True)
class Redo:
    action_type: ClassVar[ActionType] = ActionType.REDO


GameAction = Union[
    StartRound,
    EndPlayerTurn,
    AddPlayer,
    UpdatePlayerScore,
    FocusPlayer,
    BlurPlayer,
    Reset,
]

HistoryAction = Union[Undo, Redo]

Action = Union[GameAction, HistoryAction]

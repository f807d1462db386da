"""
Game State - Immutable records for players, rounds and turns.

Design principles:
- Immutable: every transition returns a new state, never mutates
- Comparable: structural equality via dataclasses
- Clock-free: timestamps are supplied by callers, never read here
"""

from __future__ import annotations
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any


DEFAULT_MAX_ROUNDS = 8


class TurnKind(Enum):
    """How a turn ended."""
    ACTION = "action"
    REACTION = "reaction"
    PASS = "pass"


class GamePhase(Enum):
    """High-level game phases, derived from state by selectors."""
    NOT_STARTED = "not_started"
    ROUND_IN_PROGRESS = "round_in_progress"
    ROUND_ENDED = "round_ended"
    GAME_OVER = "game_over"


class Score(Mapping[str, float]):
    """
    Read-only score record: category key -> value.

    Hashable so states can be used as cache keys. Compares equal
    to any mapping with the same items, plain dicts included.
    """
    __slots__ = ("_values",)

    def __init__(self, values: Mapping[str, float] | Iterable[tuple[str, float]] = ()):
        self._values = dict(values)

    def __getitem__(self, key: str) -> float:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __hash__(self) -> int:
        return hash(frozenset(self._values.items()))

    def __repr__(self) -> str:
        return f"Score({self._values!r})"

    def set(self, key: str, value: float) -> Score:
        """Return new score record with one category replaced."""
        values = dict(self._values)
        values[key] = value
        return Score(values)


@dataclass(frozen=True)
class Player:
    """
    A player at the table.

    The id is opaque and never reused. Color is a display tag and
    does not have to be unique.
    """
    player_id: str
    name: str
    color: str
    faction_id: str | None = None
    score: Score = field(default_factory=Score)

    def with_score(self, key: str, value: float) -> Player:
        """Return new player with one score category replaced."""
        return replace(self, score=self.score.set(key, value))


@dataclass(frozen=True)
class Round:
    """
    One round slot.

    A round with no start time is the trailing round that collects
    the next player order as players pass.
    """
    start_time: float | None = None
    end_time: float | None = None
    player_order: tuple[str, ...] = ()

    @property
    def is_started(self) -> bool:
        return self.start_time is not None

    @property
    def is_ended(self) -> bool:
        return self.end_time is not None

    def with_player_appended(self, player_id: str) -> Round:
        """Return new round with player added at the end of the order."""
        return replace(self, player_order=self.player_order + (player_id,))

    def with_player_prepended(self, player_id: str) -> Round:
        """Return new round with player added at the front of the order."""
        return replace(self, player_order=(player_id,) + self.player_order)


@dataclass(frozen=True)
class Turn:
    """One player's time slice within a round."""
    start_time: float
    round_index: int
    player_id: str
    end_time: float | None = None
    kind: TurnKind | None = None  # Set when the turn ends

    @property
    def is_open(self) -> bool:
        return self.end_time is None

    def close(self, end_time: float, kind: TurnKind) -> Turn:
        """Return the ended turn."""
        return replace(self, end_time=end_time, kind=kind)


@dataclass(frozen=True)
class GameState:
    """
    Complete tracker state at a point in time.

    This is the canonical state that the reducer operates on.
    Derived facts (active round, active player, ...) live in selectors
    and are never stored here.
    """
    turns: tuple[Turn, ...] = ()
    rounds: tuple[Round, ...] = (Round(),)
    players: tuple[Player, ...] = ()

    active_round_index: int | None = None  # None until the first round starts
    active_player_index: int = 0
    focused_player_id: str | None = None

    max_rounds: int = DEFAULT_MAX_ROUNDS

    @property
    def num_players(self) -> int:
        return len(self.players)

    def get_player(self, player_id: str) -> Player | None:
        """Get player by ID."""
        for p in self.players:
            if p.player_id == player_id:
                return p
        return None

    def with_player(self, player: Player) -> GameState:
        """Return new state with updated player."""
        new_players = tuple(
            player if p.player_id == player.player_id else p
            for p in self.players
        )
        return self._copy_with(players=new_players)

    def with_round(self, index: int, round_: Round) -> GameState:
        """Return new state with the round at index replaced."""
        new_rounds = list(self.rounds)
        new_rounds[index] = round_
        return self._copy_with(rounds=tuple(new_rounds))

    def _copy_with(self, **kwargs: Any) -> GameState:
        """Create a copy with some fields replaced."""
        return replace(self, **kwargs)


def default_state(max_rounds: int = DEFAULT_MAX_ROUNDS) -> GameState:
    """Empty state: no players, no turns, one trailing round."""
    return GameState(max_rounds=max_rounds)

"""
Selectors - Pure derivations from GameState.

Selectors never mutate and never read the clock. Anything that needs
"now" (running timers, totals including the open turn) takes it as an
argument.
"""

from __future__ import annotations

from .state import GameState, GamePhase, Player, Round, Turn, TurnKind


_EMPTY_ROUND = Round()


def active_round(state: GameState) -> Round | None:
    """The round at active_round_index, or None before the game starts."""
    if state.active_round_index is None:
        return None
    if not 0 <= state.active_round_index < len(state.rounds):
        return None
    return state.rounds[state.active_round_index]


def next_round(state: GameState) -> Round:
    """The trailing round that collects the next player order."""
    if not state.rounds:
        return _EMPTY_ROUND
    return state.rounds[-1]


def next_round_index(state: GameState) -> int:
    if state.active_round_index is None:
        return 0
    return state.active_round_index + 1


def active_turn(state: GameState) -> Turn | None:
    """The open turn of the active round, if any."""
    if not state.turns:
        return None
    last = state.turns[-1]
    if last.is_open and last.round_index == state.active_round_index:
        return last
    return None


def get_player(state: GameState, player_id: str | None) -> Player | None:
    if player_id is None:
        return None
    return state.get_player(player_id)


def seating_order(state: GameState) -> tuple[Player, ...]:
    """
    Players in first-round order, for listing the table.

    ADD_PLAYER prepends to the first round but appends to the roster,
    so the roster alone reads back-to-front. Players missing from the
    first round follow in roster order.
    """
    first = state.rounds[0].player_order if state.rounds else ()
    seated = [p for p in (state.get_player(pid) for pid in first) if p is not None]
    seen = {p.player_id for p in seated}
    return tuple(seated) + tuple(p for p in state.players if p.player_id not in seen)


def _player_at(state: GameState, index: int) -> Player | None:
    round_ = active_round(state)
    if round_ is None or not 0 <= index < len(round_.player_order):
        return None
    return get_player(state, round_.player_order[index])


def active_player(state: GameState) -> Player | None:
    return _player_at(state, state.active_player_index)


def next_player_index(state: GameState) -> int:
    """
    Index of the player acting after the active one.

    Passed players stay in the order and keep receiving turns,
    so this is plain wraparound.
    """
    round_ = active_round(state)
    if round_ is None or not round_.player_order:
        return 0
    return (state.active_player_index + 1) % len(round_.player_order)


def next_player(state: GameState) -> Player | None:
    return _player_at(state, next_player_index(state))


def focused_player(state: GameState) -> Player | None:
    return get_player(state, state.focused_player_id)


def player_turns(
    state: GameState,
    player_id: str,
    round_index: int | None = None,
) -> list[Turn]:
    """All turns of a player, optionally limited to one round."""
    return [
        t for t in state.turns
        if t.player_id == player_id
        and (round_index is None or t.round_index == round_index)
    ]


def has_player_passed(state: GameState, player_id: str) -> bool:
    """True if the player has a pass turn in the active round."""
    if state.active_round_index is None:
        return False
    return any(
        t.kind == TurnKind.PASS
        for t in player_turns(state, player_id, state.active_round_index)
    )


def has_active_player_passed(state: GameState) -> bool:
    player = active_player(state)
    if player is None:
        return False
    return has_player_passed(state, player.player_id)


def suggested_turn_kind(state: GameState) -> TurnKind:
    """Kind of a non-pass turn end: reaction once the player has passed."""
    if has_active_player_passed(state):
        return TurnKind.REACTION
    return TurnKind.ACTION


def turn_duration(turn: Turn, now: float | None = None) -> float:
    """
    Elapsed time of a turn.

    An open turn runs until `now`; without `now` it counts as zero.
    """
    end = turn.end_time if turn.end_time is not None else now
    if end is None:
        return 0.0
    return end - turn.start_time


def round_duration(round_: Round, now: float | None = None) -> float:
    if round_.start_time is None:
        return 0.0
    end = round_.end_time if round_.end_time is not None else now
    if end is None:
        return 0.0
    return end - round_.start_time


def total_player_time(
    state: GameState,
    player_id: str,
    now: float | None = None,
) -> float:
    """Cumulative game clock of a player across all rounds."""
    return sum(turn_duration(t, now) for t in player_turns(state, player_id))


def is_round_in_progress(state: GameState) -> bool:
    round_ = active_round(state)
    return round_ is not None and round_.is_started and not round_.is_ended


def is_game_over(state: GameState) -> bool:
    """True once the last playable round has ended."""
    round_ = active_round(state)
    if round_ is None or not round_.is_ended:
        return False
    return state.active_round_index >= state.max_rounds - 1


def game_phase(state: GameState) -> GamePhase:
    if active_round(state) is None:
        return GamePhase.NOT_STARTED
    if is_game_over(state):
        return GamePhase.GAME_OVER
    if is_round_in_progress(state):
        return GamePhase.ROUND_IN_PROGRESS
    return GamePhase.ROUND_ENDED

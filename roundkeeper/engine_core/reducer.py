"""
Reducer - Applies actions to tracker state.

The reducer is the single point of state transition.
All state changes must go through apply_action().

Design principles:
- Pure function: (state, action) -> new_state
- Total: never raises for a well-formed action
- Stale or out-of-place actions return the input state object unchanged
- Reads derived facts through selectors only
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Callable
import logging

from . import selectors
from .state import GameState, Player, Round, Turn, TurnKind, default_state
from .action import (
    ActionType,
    GameAction,
    StartRound,
    EndPlayerTurn,
    AddPlayer,
    UpdatePlayerScore,
    FocusPlayer,
    BlurPlayer,
    Reset,
)


logger = logging.getLogger(__name__)

Handler = Callable[[GameState, GameAction], GameState]


@dataclass
class Reducer:
    """
    Reducer applies actions to tracker state.

    Stateless - all state is in GameState.
    """

    def __call__(self, state: GameState, action: GameAction) -> GameState:
        return self.apply(state, action)

    def apply(self, state: GameState, action: GameAction) -> GameState:
        """
        Apply an action to the state.

        Returns the new state, or the same object when the action
        does not apply.
        """
        handler = self._get_handler(action.action_type)
        if not handler:
            logger.debug("No handler for action type %s", action.action_type)
            return state
        return handler(state, action)

    def _get_handler(self, action_type: ActionType) -> Handler | None:
        """Get the handler function for an action type."""
        handlers: dict[ActionType, Handler] = {
            ActionType.START_ROUND: self._handle_start_round,
            ActionType.END_PLAYER_TURN: self._handle_end_player_turn,
            ActionType.ADD_PLAYER: self._handle_add_player,
            ActionType.UPDATE_PLAYER_SCORE: self._handle_update_player_score,
            ActionType.FOCUS_PLAYER: self._handle_focus_player,
            ActionType.BLUR_PLAYER: self._handle_blur_player,
            ActionType.RESET: self._handle_reset,
        }
        return handlers.get(action_type)

    def _handle_start_round(self, state: GameState, action: StartRound) -> GameState:
        """Promote the trailing round to active and open its first turn."""
        if selectors.is_round_in_progress(state):
            logger.debug("Ignoring START_ROUND: a round is already in progress")
            return state
        if selectors.is_game_over(state):
            logger.debug("Ignoring START_ROUND: game is over")
            return state

        previous = selectors.active_round(state)
        round_index = len(state.rounds) - 1
        upcoming = state.rounds[round_index]

        # Players who never passed last round go last, in their old order
        order = list(upcoming.player_order)
        carry_over = list(previous.player_order) if previous else []
        carry_over += [p.player_id for p in state.players]
        for player_id in carry_over:
            if player_id not in order:
                order.append(player_id)

        if not order:
            logger.debug("Ignoring START_ROUND: no players")
            return state

        started = Round(start_time=action.timestamp, player_order=tuple(order))
        first_turn = Turn(
            start_time=action.timestamp,
            round_index=round_index,
            player_id=order[0],
        )

        return state._copy_with(
            rounds=state.rounds[:-1] + (started, Round()),
            turns=state.turns + (first_turn,),
            active_round_index=round_index,
            active_player_index=0,
        )

    def _handle_end_player_turn(self, state: GameState, action: EndPlayerTurn) -> GameState:
        """Close the open turn, record passes, and either hand over or end the round."""
        open_turn = selectors.active_turn(state)
        current = selectors.active_player(state)
        following = selectors.next_player(state)
        if open_turn is None or current is None or following is None:
            logger.debug("Ignoring END_PLAYER_TURN: no open turn or active player")
            return state

        upcoming = selectors.next_round(state)
        is_first_time_passing = (
            action.kind == TurnKind.PASS
            and not selectors.has_active_player_passed(state)
        )
        if is_first_time_passing:
            upcoming = upcoming.with_player_appended(current.player_id)
        is_last_pass_for_round = (
            is_first_time_passing
            and len(upcoming.player_order) >= state.num_players - 1
        )

        turns = state.turns[:-1] + (open_turn.close(action.timestamp, action.kind),)
        new_state = state.with_round(len(state.rounds) - 1, upcoming)

        if is_last_pass_for_round:
            ended = selectors.active_round(state)
            new_state = new_state.with_round(
                state.active_round_index,
                Round(
                    start_time=ended.start_time,
                    end_time=action.timestamp,
                    player_order=ended.player_order,
                ),
            )
            return new_state._copy_with(turns=turns, active_player_index=0)

        next_turn = Turn(
            start_time=action.timestamp,
            round_index=state.active_round_index,
            player_id=following.player_id,
        )
        return new_state._copy_with(
            turns=turns + (next_turn,),
            active_player_index=selectors.next_player_index(state),
        )

    def _handle_add_player(self, state: GameState, action: AddPlayer) -> GameState:
        """Add a player to the roster and to the front of the first round."""
        if state.active_round_index is not None:
            logger.debug("Ignoring ADD_PLAYER: game already started")
            return state
        if state.get_player(action.player_id) is not None:
            logger.debug("Ignoring ADD_PLAYER: duplicate id %s", action.player_id)
            return state

        player = Player(
            player_id=action.player_id,
            name=action.name,
            color=action.color,
            faction_id=action.faction_id,
        )
        first_round = state.rounds[0].with_player_prepended(player.player_id)
        return state.with_round(0, first_round)._copy_with(
            players=state.players + (player,),
        )

    def _handle_update_player_score(
        self, state: GameState, action: UpdatePlayerScore
    ) -> GameState:
        player = state.get_player(action.player_id)
        if player is None:
            logger.debug("Ignoring UPDATE_PLAYER_SCORE: unknown player %s", action.player_id)
            return state
        if action.key in player.score and player.score[action.key] == action.value:
            return state
        return state.with_player(player.with_score(action.key, action.value))

    def _handle_focus_player(self, state: GameState, action: FocusPlayer) -> GameState:
        if state.focused_player_id == action.player_id:
            return state
        if state.get_player(action.player_id) is None:
            logger.debug("Ignoring FOCUS_PLAYER: unknown player %s", action.player_id)
            return state
        return state._copy_with(focused_player_id=action.player_id)

    def _handle_blur_player(self, state: GameState, action: BlurPlayer) -> GameState:
        if state.focused_player_id is None:
            return state
        return state._copy_with(focused_player_id=None)

    def _handle_reset(self, state: GameState, action: Reset) -> GameState:
        return default_state(max_rounds=state.max_rounds)


_default_reducer = Reducer()


def apply_action(state: GameState, action: GameAction) -> GameState:
    """
    Convenience function to apply an action.

    Usage:
        state = apply_action(state, StartRound(timestamp=time.time()))
    """
    return _default_reducer.apply(state, action)

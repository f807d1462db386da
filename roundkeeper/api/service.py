"""
API Service - Business logic layer between API and engine.

The service:
1. Translates API requests to engine actions
2. Stamps time-sensitive actions with the server clock
3. Manages sessions
4. Renders selector output into response models

This layer is framework-agnostic (can be used with FastAPI, Flask, etc.)
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Callable
import logging
import time

from .schemas import (
    # Requests
    ActionRequest,
    AddPlayerRequest,
    CreateSessionRequest,
    EndPlayerTurnRequest,
    FocusPlayerRequest,
    StartRoundRequest,
    UpdatePlayerScoreRequest,
    # Responses
    ErrorResponse,
    GameStateResponse,
    PlayerSummary,
    SessionResponse,
    SummaryResponse,
    # Shared
    FactionInfo,
    PlayerInfo,
    RoundInfo,
    TurnInfo,
    # Enums
    ErrorCode,
    GamePhaseName,
    SessionStatus,
    TurnKindName,
)
from ..engine_core import selectors
from ..engine_core.action import (
    Action,
    AddPlayer,
    BlurPlayer,
    EndPlayerTurn,
    FocusPlayer,
    Redo,
    Reset,
    StartRound,
    Undo,
    UpdatePlayerScore,
)
from ..engine_core.state import GameState, Turn, TurnKind
from ..games.eclipse import ECLIPSE_ROUNDS, FACTIONS, SeatSpec, get_faction
from ..session import Session, SessionManager


logger = logging.getLogger(__name__)


class UnknownFactionError(ValueError):
    """Raised when a request references a faction outside the catalog."""

    def __init__(self, faction_id: str):
        super().__init__(f"Unknown faction: {faction_id}")
        self.faction_id = faction_id


@dataclass
class APIService:
    """
    Main API service for UI clients.

    Usage:
        service = APIService()

        # Create session
        response = service.create_session(CreateSessionRequest())

        # Dispatch an action
        response = service.dispatch(session_id, EndPlayerTurnRequest(kind="pass"))
    """
    session_manager: SessionManager = field(default_factory=SessionManager)
    default_max_rounds: int = ECLIPSE_ROUNDS
    clock: Callable[[], float] = time.time

    def create_session(self, request: CreateSessionRequest) -> SessionResponse:
        """
        Create a new tracker session.

        Raises:
            UnknownFactionError: if a seat references an unknown faction
            ValueError: on an unsupported roster
        """
        seats = None
        if request.players is not None:
            for seat in request.players:
                if seat.faction_id and get_faction(seat.faction_id) is None:
                    raise UnknownFactionError(seat.faction_id)
            seats = [
                SeatSpec(name=s.name, color=s.color, faction_id=s.faction_id)
                for s in request.players
            ]

        session = self.session_manager.create_session(
            seats,
            max_rounds=(
                request.max_rounds if request.max_rounds is not None else self.default_max_rounds
            ),
        )
        return self._session_to_response(session)

    def get_session(self, session_id: str) -> SessionResponse | ErrorResponse:
        """Get session status."""
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._not_found(session_id)
        return self._session_to_response(session)

    def end_session(self, session_id: str, reason: str = "user_ended") -> bool:
        """End a session."""
        return self.session_manager.end_session(session_id, reason)

    def list_sessions(self) -> list[str]:
        """List live session IDs."""
        return self.session_manager.list_sessions()

    def list_factions(self) -> list[FactionInfo]:
        return [FactionInfo.model_validate(f) for f in FACTIONS]

    def dispatch(
        self,
        session_id: str,
        request: ActionRequest,
    ) -> SessionResponse | ErrorResponse:
        """
        Apply one action to a session.

        Actions that do not apply in the current state leave it unchanged.

        Raises:
            UnknownFactionError: if ADD_PLAYER references an unknown faction
        """
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._not_found(session_id)

        action = self.to_action(request)
        before = session.game_state
        session.dispatch(action)
        if session.game_state is before:
            logger.debug("Session %s: %s left state unchanged", session_id, request.type)

        return self._session_to_response(session)

    def get_summary(self, session_id: str) -> SummaryResponse | ErrorResponse:
        """Get per-player totals."""
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._not_found(session_id)

        state = session.game_state
        now = self.clock()
        rounds_played = sum(1 for r in state.rounds if r.is_ended)
        return SummaryResponse(
            session_id=session_id,
            phase=GamePhaseName(selectors.game_phase(state).value),
            rounds_played=rounds_played,
            players=[
                PlayerSummary(
                    player_id=p.player_id,
                    name=p.name,
                    color=p.color,
                    faction_id=p.faction_id,
                    total_time=selectors.total_player_time(state, p.player_id, now),
                    score=dict(p.score),
                )
                for p in selectors.seating_order(state)
            ],
        )

    # =========================================================================
    # Conversion helpers
    # =========================================================================

    def to_action(self, request: ActionRequest) -> Action:
        """Convert a request model into an engine action."""
        if isinstance(request, StartRoundRequest):
            return StartRound(timestamp=self._timestamp(request.timestamp))
        if isinstance(request, EndPlayerTurnRequest):
            return EndPlayerTurn(
                timestamp=self._timestamp(request.timestamp),
                kind=TurnKind(request.kind.value),
            )
        if isinstance(request, AddPlayerRequest):
            if request.faction_id and get_faction(request.faction_id) is None:
                raise UnknownFactionError(request.faction_id)
            return AddPlayer(
                name=request.name,
                color=request.color,
                faction_id=request.faction_id,
            )
        if isinstance(request, UpdatePlayerScoreRequest):
            return UpdatePlayerScore(
                player_id=request.player_id,
                key=request.key,
                value=request.value,
            )
        if isinstance(request, FocusPlayerRequest):
            return FocusPlayer(player_id=request.player_id)

        simple: dict[str, Action] = {
            "blur_player": BlurPlayer(),
            "reset": Reset(),
            "undo": Undo(),
            "redo": Redo(),
        }
        return simple[request.type]

    def _timestamp(self, value: float | None) -> float:
        return value if value is not None else self.clock()

    def _not_found(self, session_id: str) -> ErrorResponse:
        return ErrorResponse(
            error=f"Session {session_id} not found",
            error_code=ErrorCode.SESSION_NOT_FOUND,
        )

    def _session_to_response(self, session: Session) -> SessionResponse:
        return SessionResponse(
            session_id=session.session_id,
            status=SessionStatus(session.state.value),
            created_at=session.created_at,
            can_undo=session.store.can_undo,
            can_redo=session.store.can_redo,
            game_state=self._state_to_response(session.game_state),
        )

    def _state_to_response(self, state: GameState) -> GameStateResponse:
        now = self.clock()
        active = selectors.active_player(state)
        following = selectors.next_player(state)
        open_turn = selectors.active_turn(state)
        active_id = active.player_id if active else None

        return GameStateResponse(
            phase=GamePhaseName(selectors.game_phase(state).value),
            max_rounds=state.max_rounds,
            active_round_index=state.active_round_index,
            next_round_index=selectors.next_round_index(state),
            active_player_index=state.active_player_index,
            active_player_id=active_id,
            next_player_id=following.player_id if following else None,
            focused_player_id=state.focused_player_id,
            active_turn=self._turn_to_info(open_turn, now) if open_turn else None,
            suggested_turn_kind=TurnKindName(selectors.suggested_turn_kind(state).value),
            players=[
                PlayerInfo(
                    player_id=p.player_id,
                    name=p.name,
                    color=p.color,
                    faction_id=p.faction_id,
                    score=dict(p.score),
                    total_time=selectors.total_player_time(state, p.player_id, now),
                    has_passed=selectors.has_player_passed(state, p.player_id),
                    is_active=p.player_id == active_id and open_turn is not None,
                    is_focused=p.player_id == state.focused_player_id,
                )
                for p in selectors.seating_order(state)
            ],
            rounds=[
                RoundInfo(
                    index=i,
                    start_time=r.start_time,
                    end_time=r.end_time,
                    player_order=list(r.player_order),
                    duration=selectors.round_duration(r, now),
                )
                for i, r in enumerate(state.rounds)
            ],
            turns=[self._turn_to_info(t, now) for t in state.turns],
        )

    def _turn_to_info(self, turn: Turn, now: float) -> TurnInfo:
        return TurnInfo(
            player_id=turn.player_id,
            round_index=turn.round_index,
            start_time=turn.start_time,
            end_time=turn.end_time,
            kind=TurnKindName(turn.kind.value) if turn.kind else None,
            duration=selectors.turn_duration(turn, now),
        )

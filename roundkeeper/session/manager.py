"""
Session Manager - Creates and manages tracker sessions.

LIFECYCLE:
1. Table sits down → create session with the roster (in-memory only)
2. During game:
   - UI dispatches actions with wall-clock timestamps
   - Store records every change for undo/redo
   - UI reads derived values through selectors
3. Game ends or table leaves → session destroyed, ALL state deleted

PERSISTENCE RULES:
- NO database, NO files
- Each session owns exactly one GameStore
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable
import logging
import time
import uuid

from ..engine_core import selectors
from ..engine_core.action import Action
from ..engine_core.history import GameStore
from ..engine_core.state import GamePhase, GameState
from ..games.eclipse import ECLIPSE_ROUNDS, SeatSpec, create_store


logger = logging.getLogger(__name__)


class SessionState(Enum):
    """State of a tracker session."""
    ACTIVE = "active"  # Game set up or in progress
    GAME_OVER = "game_over"  # Final round resolved
    ABANDONED = "abandoned"  # Ended before the final round


@dataclass
class Session:
    """
    An ephemeral tracker session.

    The session is destroyed when the game ends.
    State is NOT persisted.
    """
    session_id: str
    store: GameStore
    created_at: float
    state: SessionState = SessionState.ACTIVE

    # Session metadata
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def game_state(self) -> GameState:
        return self.store.state

    def is_active(self) -> bool:
        """Check if session is still active."""
        return self.state == SessionState.ACTIVE

    def dispatch(self, action: Action) -> GameState:
        """Apply an action and track game over."""
        new_state = self.store.dispatch(action)
        if selectors.game_phase(new_state) == GamePhase.GAME_OVER:
            if self.state != SessionState.GAME_OVER:
                logger.info("Session %s reached game over", self.session_id)
            self.state = SessionState.GAME_OVER
        elif self.state == SessionState.GAME_OVER:
            # Undo out of the final state
            self.state = SessionState.ACTIVE
        return new_state


class SessionManager:
    """
    Manages tracker sessions.

    Responsibilities:
    - Create sessions from a roster
    - Track active sessions
    - Clean up finished sessions

    No persistence - sessions are in-memory only.
    """

    def __init__(self, history_limit: int | None = None):
        self._sessions: dict[str, Session] = {}
        self._history_limit = history_limit

    def create_session(
        self,
        seats: Iterable[SeatSpec] | None = None,
        max_rounds: int = ECLIPSE_ROUNDS,
        metadata: dict[str, Any] | None = None,
    ) -> Session:
        """
        Create a new tracker session.

        Args:
            seats: Players in first-round order (defaults to the demo table)
            max_rounds: Number of playable rounds
            metadata: Free-form data kept with the session

        Returns:
            New Session ready for START_ROUND

        Raises:
            ValueError: on an invalid roster or round count
        """
        store = create_store(
            seats,
            max_rounds=max_rounds,
            history_limit=self._history_limit,
        )
        session = Session(
            session_id=str(uuid.uuid4()),
            store=store,
            created_at=time.time(),
            metadata=metadata or {},
        )

        self._sessions[session.session_id] = session
        logger.info(
            "Created session %s with %d players",
            session.session_id,
            session.game_state.num_players,
        )
        return session

    def get_session(self, session_id: str) -> Session | None:
        """Get a session by ID."""
        return self._sessions.get(session_id)

    def end_session(self, session_id: str, reason: str = "completed") -> bool:
        """
        End a session and drop it from memory.

        Returns False if the session does not exist.
        """
        session = self._sessions.pop(session_id, None)
        if not session:
            return False

        if session.state != SessionState.GAME_OVER:
            session.state = SessionState.ABANDONED
        logger.info("Ended session %s (%s)", session_id, reason)
        return True

    def list_active_sessions(self) -> list[str]:
        """List IDs of active sessions."""
        return [
            sid for sid, session in self._sessions.items()
            if session.is_active()
        ]

    def list_sessions(self) -> list[str]:
        """List IDs of all live sessions, finished ones included."""
        return list(self._sessions)

    def cleanup_stale_sessions(self, max_age_seconds: int = 3600) -> int:
        """
        Clean up finished sessions older than max_age.

        Returns the number of sessions removed.
        """
        current_time = time.time()
        to_remove = [
            session_id
            for session_id, session in self._sessions.items()
            if current_time - session.created_at > max_age_seconds
            and not session.is_active()
        ]

        for session_id in to_remove:
            self.end_session(session_id, reason="stale")
        return len(to_remove)

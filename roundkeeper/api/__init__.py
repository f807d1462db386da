"""
API Module - UI client interface.

Exposes the tracker via REST API. A client:
1. Creates a session with the table's players
2. Dispatches actions (start round, end turn, undo, ...)
3. Renders the returned state and derived values
4. Fetches the end-of-game summary

All state is session-scoped. No persistent user accounts required.
"""

from .schemas import (
    # Requests
    CreateSessionRequest,
    SeatRequest,
    ActionRequest,
    # Responses
    SessionResponse,
    GameStateResponse,
    SummaryResponse,
    ErrorResponse,
    # Shared
    PlayerInfo,
    RoundInfo,
    TurnInfo,
    FactionInfo,
)
from .service import APIService, UnknownFactionError
from .app import create_app

__all__ = [
    # Requests
    "CreateSessionRequest",
    "SeatRequest",
    "ActionRequest",
    # Responses
    "SessionResponse",
    "GameStateResponse",
    "SummaryResponse",
    "ErrorResponse",
    # Shared
    "PlayerInfo",
    "RoundInfo",
    "TurnInfo",
    "FactionInfo",
    # Service
    "APIService",
    "UnknownFactionError",
    "create_app",
]

"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the exact contract between a UI client and the tracker.
All responses include explicit types for OpenAPI schema generation.

Error Codes:
- SESSION_NOT_FOUND: Session does not exist or has ended
- UNKNOWN_FACTION: Faction ID is not in the catalog
- VALIDATION_ERROR: Request parameters are invalid
- INTERNAL_ERROR: Unexpected failure
"""

from enum import Enum
from typing import Annotated, Literal, Optional, Union
from pydantic import BaseModel, Field


# =============================================================================
# Enums
# =============================================================================

class SessionStatus(str, Enum):
    """Session status values."""
    ACTIVE = "active"
    GAME_OVER = "game_over"
    ABANDONED = "abandoned"


class GamePhaseName(str, Enum):
    """Derived game phase."""
    NOT_STARTED = "not_started"
    ROUND_IN_PROGRESS = "round_in_progress"
    ROUND_ENDED = "round_ended"
    GAME_OVER = "game_over"


class TurnKindName(str, Enum):
    """How a turn ended."""
    ACTION = "action"
    REACTION = "reaction"
    PASS = "pass"


class ErrorCode(str, Enum):
    """Structured error codes."""
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    UNKNOWN_FACTION = "UNKNOWN_FACTION"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# =============================================================================
# Shared Models
# =============================================================================

class FactionInfo(BaseModel):
    """A faction from the catalog."""
    id: str
    name: str
    color: str
    icon: str

    model_config = {"from_attributes": True}


class PlayerInfo(BaseModel):
    """Player information for display."""
    player_id: str
    name: str
    color: str
    faction_id: Optional[str] = None
    score: dict[str, float] = Field(default_factory=dict)
    total_time: float = Field(0.0, description="Seconds on the clock across all rounds")
    has_passed: bool = Field(False, description="Passed in the active round")
    is_active: bool = False
    is_focused: bool = False


class RoundInfo(BaseModel):
    """A round slot."""
    index: int
    start_time: Optional[float] = None
    end_time: Optional[float] = None
    player_order: list[str] = Field(default_factory=list)
    duration: float = 0.0


class TurnInfo(BaseModel):
    """A single turn."""
    player_id: str
    round_index: int
    start_time: float
    end_time: Optional[float] = None
    kind: Optional[TurnKindName] = None
    duration: float = 0.0


# =============================================================================
# Request Models
# =============================================================================

class SeatRequest(BaseModel):
    """One player at the table."""
    name: str = Field(..., min_length=1)
    color: str = Field(..., min_length=1)
    faction_id: Optional[str] = Field(None, description="ID from GET /factions")


class CreateSessionRequest(BaseModel):
    """Request to create a new tracker session."""
    players: Optional[list[SeatRequest]] = Field(
        None, description="Players in first-round order; defaults to a demo table"
    )
    max_rounds: Optional[int] = Field(None, ge=1, le=99, description="Playable rounds")


class StartRoundRequest(BaseModel):
    type: Literal["start_round"] = "start_round"
    timestamp: Optional[float] = Field(None, description="Defaults to server time")


class EndPlayerTurnRequest(BaseModel):
    type: Literal["end_player_turn"] = "end_player_turn"
    kind: TurnKindName
    timestamp: Optional[float] = Field(None, description="Defaults to server time")


class AddPlayerRequest(BaseModel):
    type: Literal["add_player"] = "add_player"
    name: str = Field(..., min_length=1)
    color: str = Field(..., min_length=1)
    faction_id: Optional[str] = None


class UpdatePlayerScoreRequest(BaseModel):
    type: Literal["update_player_score"] = "update_player_score"
    player_id: str
    key: str
    value: float


class FocusPlayerRequest(BaseModel):
    type: Literal["focus_player"] = "focus_player"
    player_id: str


class BlurPlayerRequest(BaseModel):
    type: Literal["blur_player"] = "blur_player"


class ResetRequest(BaseModel):
    type: Literal["reset"] = "reset"


class UndoRequest(BaseModel):
    type: Literal["undo"] = "undo"


class RedoRequest(BaseModel):
    type: Literal["redo"] = "redo"


ActionRequestBody = Union[
    StartRoundRequest,
    EndPlayerTurnRequest,
    AddPlayerRequest,
    UpdatePlayerScoreRequest,
    FocusPlayerRequest,
    BlurPlayerRequest,
    ResetRequest,
    UndoRequest,
    RedoRequest,
]

ActionRequest = Annotated[ActionRequestBody, Field(discriminator="type")]


# =============================================================================
# Response Models
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str = Field(..., description="Human-readable error message")
    error_code: ErrorCode = Field(..., description="Machine-readable error code")
    details: Optional[dict] = Field(None, description="Additional error context")
    api_version: str = Field("v1", description="API version")


class GameStateResponse(BaseModel):
    """Tracker state plus derived values, evaluated at server time."""
    phase: GamePhaseName
    max_rounds: int
    active_round_index: Optional[int] = None
    next_round_index: int = 0
    active_player_index: int = 0
    active_player_id: Optional[str] = None
    next_player_id: Optional[str] = None
    focused_player_id: Optional[str] = None
    active_turn: Optional[TurnInfo] = None
    suggested_turn_kind: TurnKindName = TurnKindName.ACTION
    players: list[PlayerInfo] = Field(default_factory=list)
    rounds: list[RoundInfo] = Field(default_factory=list)
    turns: list[TurnInfo] = Field(default_factory=list)


class SessionResponse(BaseModel):
    """Session status and current state."""
    session_id: str
    status: SessionStatus
    created_at: float
    can_undo: bool = False
    can_redo: bool = False
    game_state: GameStateResponse


class PlayerSummary(BaseModel):
    """End-of-game line for one player."""
    player_id: str
    name: str
    color: str
    faction_id: Optional[str] = None
    total_time: float
    score: dict[str, float] = Field(default_factory=dict)


class SummaryResponse(BaseModel):
    """Per-player totals for the whole game."""
    session_id: str
    phase: GamePhaseName
    rounds_played: int
    players: list[PlayerSummary] = Field(default_factory=list)


class SessionListResponse(BaseModel):
    sessions: list[str]
    count: int


class EndSessionResponse(BaseModel):
    success: bool
    session_id: str


class FactionListResponse(BaseModel):
    factions: list[FactionInfo]


class HealthResponse(BaseModel):
    status: str = "ok"
    environment: str
    active_sessions: int

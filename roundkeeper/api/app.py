"""
FastAPI Application - REST API for tracker UIs.

Endpoints:
    GET    /api/v1/health                    Service health
    GET    /api/v1/factions                  Faction catalog
    POST   /api/v1/sessions                  Create tracker session
    GET    /api/v1/sessions                  List sessions
    GET    /api/v1/sessions/{id}             Get session state
    DELETE /api/v1/sessions/{id}             End session
    POST   /api/v1/sessions/{id}/actions     Dispatch an action (incl. undo/redo)
    GET    /api/v1/sessions/{id}/summary     Per-player totals

Clock handling:
    START_ROUND and END_PLAYER_TURN take an optional timestamp.
    When omitted, the server stamps the action with its own clock.

All responses are JSON with explicit Pydantic schemas.
"""

from typing import Annotated, Union
import logging
import os

# Environment configuration
ROUNDKEEPER_ENV = os.getenv("ROUNDKEEPER_ENV", "development")
ROUNDKEEPER_MAX_ROUNDS = int(os.getenv("ROUNDKEEPER_MAX_ROUNDS", "8"))
ROUNDKEEPER_SESSION_TTL = int(os.getenv("ROUNDKEEPER_SESSION_TTL", "3600"))
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")


logger = logging.getLogger(__name__)


def create_app(service=None):
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (creates new if not provided)

    Returns:
        FastAPI application instance
    """
    try:
        from fastapi import Body, FastAPI, Query
        from fastapi.middleware.cors import CORSMiddleware
        from fastapi.responses import JSONResponse
    except ImportError:
        raise ImportError(
            "FastAPI not installed. Install with: pip install fastapi uvicorn"
        )

    from .service import APIService, UnknownFactionError
    from .schemas import (
        # Request models
        ActionRequestBody,
        CreateSessionRequest,
        # Response models
        EndSessionResponse,
        ErrorResponse,
        FactionListResponse,
        HealthResponse,
        SessionListResponse,
        SessionResponse,
        SummaryResponse,
        # Enums
        ErrorCode,
    )

    app = FastAPI(
        title="Roundkeeper API",
        description="""
Turn and round clock for tabletop strategy games.

## Game Flow

1. `POST /sessions` with the players in first-round order
2. `POST /actions` with `start_round`
3. `POST /actions` with `end_player_turn` (`action`, `reaction` or `pass`)
   until all but one player has passed; the round then ends
4. Repeat from 2 until the final round ends
5. `GET /summary` for total time per player

Every change can be reverted with `undo` and reapplied with `redo`.
Actions that do not apply (e.g. ending a turn between rounds) leave the state unchanged.

## Error Codes

| Code | Description |
|------|-------------|
| `SESSION_NOT_FOUND` | Session does not exist |
| `UNKNOWN_FACTION` | Faction ID not in the catalog |
| `VALIDATION_ERROR` | Invalid request parameters |
        """,
        version="1.0.0",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    api_service = service or APIService(default_max_rounds=ROUNDKEEPER_MAX_ROUNDS)

    # =========================================================================
    # Error helpers
    # =========================================================================

    def make_error_response(
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: dict | None = None,
    ) -> JSONResponse:
        """Create a standardized error response."""
        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse(
                error=message,
                error_code=error_code,
                details=details,
            ).model_dump(mode="json"),
        )

    def error_from_service(error: ErrorResponse) -> JSONResponse:
        status_code = 404 if error.error_code == ErrorCode.SESSION_NOT_FOUND else 400
        return make_error_response(error.error_code, error.error, status_code=status_code)

    # =========================================================================
    # Meta Endpoints
    # =========================================================================

    @app.get(
        "/api/v1/health",
        response_model=HealthResponse,
        tags=["Meta"],
        summary="Service health",
    )
    async def health() -> HealthResponse:
        return HealthResponse(
            environment=ROUNDKEEPER_ENV,
            active_sessions=len(api_service.session_manager.list_active_sessions()),
        )

    @app.get(
        "/api/v1/factions",
        response_model=FactionListResponse,
        tags=["Meta"],
        summary="List factions",
    )
    async def list_factions() -> FactionListResponse:
        return FactionListResponse(factions=api_service.list_factions())

    # =========================================================================
    # Session Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/sessions",
        response_model=SessionResponse,
        responses={
            400: {"model": ErrorResponse, "description": "Invalid roster or faction"},
        },
        tags=["Sessions"],
        summary="Create a new tracker session",
    )
    async def create_session(
        body: Annotated[CreateSessionRequest, Body()] = CreateSessionRequest(),
    ) -> Union[SessionResponse, JSONResponse]:
        """
        Create a new tracker session.

        Players act in the listed order in the first round.
        Without `players`, a three-player demo table is created.
        """
        removed = api_service.session_manager.cleanup_stale_sessions(ROUNDKEEPER_SESSION_TTL)
        if removed:
            logger.info("Removed %d stale sessions", removed)

        try:
            return api_service.create_session(body)
        except UnknownFactionError as e:
            return make_error_response(
                ErrorCode.UNKNOWN_FACTION,
                str(e),
                details={"faction_id": e.faction_id},
            )
        except ValueError as e:
            return make_error_response(ErrorCode.VALIDATION_ERROR, str(e))

    @app.get(
        "/api/v1/sessions",
        response_model=SessionListResponse,
        tags=["Sessions"],
        summary="List sessions",
    )
    async def list_sessions() -> SessionListResponse:
        sessions = api_service.list_sessions()
        return SessionListResponse(sessions=sessions, count=len(sessions))

    @app.get(
        "/api/v1/sessions/{session_id}",
        response_model=SessionResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Sessions"],
        summary="Get session state",
    )
    async def get_session(session_id: str) -> Union[SessionResponse, JSONResponse]:
        response = api_service.get_session(session_id)
        if isinstance(response, ErrorResponse):
            return error_from_service(response)
        return response

    @app.delete(
        "/api/v1/sessions/{session_id}",
        response_model=EndSessionResponse,
        tags=["Sessions"],
        summary="End a tracker session",
    )
    async def end_session(
        session_id: str,
        reason: Annotated[str, Query(description="Reason for ending")] = "user_ended",
    ) -> EndSessionResponse:
        success = api_service.end_session(session_id, reason)
        return EndSessionResponse(success=success, session_id=session_id)

    # =========================================================================
    # Game Loop Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/sessions/{session_id}/actions",
        response_model=SessionResponse,
        responses={
            400: {"model": ErrorResponse, "description": "Invalid action"},
            404: {"model": ErrorResponse, "description": "Session not found"},
        },
        tags=["Game Loop"],
        summary="Dispatch an action",
    )
    async def dispatch_action(
        session_id: str,
        body: Annotated[ActionRequestBody, Body(discriminator="type")],
    ) -> Union[SessionResponse, JSONResponse]:
        """
        Dispatch one action to the session.

        **Request Body:**
        ```json
        {"type": "end_player_turn", "kind": "pass"}
        ```
        """
        try:
            response = api_service.dispatch(session_id, body)
        except UnknownFactionError as e:
            return make_error_response(
                ErrorCode.UNKNOWN_FACTION,
                str(e),
                details={"faction_id": e.faction_id},
            )
        if isinstance(response, ErrorResponse):
            return error_from_service(response)
        return response

    @app.get(
        "/api/v1/sessions/{session_id}/summary",
        response_model=SummaryResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Game Loop"],
        summary="Per-player totals",
    )
    async def get_summary(session_id: str) -> Union[SummaryResponse, JSONResponse]:
        response = api_service.get_summary(session_id)
        if isinstance(response, ErrorResponse):
            return error_from_service(response)
        return response

    logger.info("Roundkeeper API created (env=%s)", ROUNDKEEPER_ENV)
    return app


# For running directly: uvicorn roundkeeper.api.app:app
app = create_app()

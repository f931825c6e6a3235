"""Active-session listing for the signed-in user."""

from fastapi import APIRouter, Depends, status

from src.adapters.api.v1.auth.dependencies import get_session_service
from src.adapters.api.v1.auth.schemas import SessionListResponse, SessionOut
from src.core.dependencies.auth import CurrentSession
from src.domain.services.auth.session import SessionService

router = APIRouter()


@router.get(
    "",
    response_model=SessionListResponse,
    status_code=status.HTTP_200_OK,
    tags=["auth"],
    summary="List the caller's active sessions",
)
async def list_sessions(
    current: CurrentSession,
    session_service: SessionService = Depends(get_session_service),
) -> SessionListResponse:
    sessions = await session_service.get_user_sessions(current.user_id)
    return SessionListResponse(
        sessions=[SessionOut.from_entity(session, current.session_id) for session in sessions]
    )

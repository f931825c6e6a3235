"""Session validation endpoint.

A second opinion for clients that received a *401*: is this token's session
really gone, or was the failure transient? The answer is always a *200* with
a structured body, so that only transport-level failures ever look like
errors to the caller.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Header, status
from structlog import get_logger

from src.adapters.api.v1.auth.dependencies import get_session_validation_service
from src.adapters.api.v1.auth.schemas import SessionValidationResponse
from src.domain.services.auth.session_validation import (
    REASON_ERROR,
    SessionValidationService,
)

logger = get_logger(__name__)
router = APIRouter()


@router.post(
    "",
    response_model=SessionValidationResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_200_OK,
    tags=["auth"],
    summary="Validate the session behind a bearer token",
)
async def validate_session(
    authorization: Optional[str] = Header(default=None),
    validation_service: SessionValidationService = Depends(get_session_validation_service),
) -> SessionValidationResponse:
    try:
        result = await validation_service.validate_authorization(authorization)
    except Exception as e:
        # The contract is a parseable answer; an unexpected failure is "not valid".
        await logger.aerror(
            "Unexpected error during session validation",
            error_type=type(e).__name__,
            error_message=str(e),
        )
        return SessionValidationResponse(valid=False, reason=REASON_ERROR)

    return SessionValidationResponse(**result.to_response())

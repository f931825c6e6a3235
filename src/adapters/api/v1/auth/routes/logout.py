from __future__ import annotations

"""
Logout Route.

Thin endpoint that delegates session revocation to the logout service and
only handles HTTP concerns. Logout always reports success so a client can
never be left looking authenticated; partial failures are logged from the
returned `LogoutResult`.
"""

from json import JSONDecodeError
from typing import Optional

from fastapi import APIRouter, Depends, Header, Request, status
from pydantic import ValidationError as PayloadValidationError
from structlog import get_logger

from src.adapters.api.v1.auth.dependencies import get_logout_service
from src.adapters.api.v1.auth.schemas import LogoutRequest, MessageResponse
from src.domain.services.auth.logout import LogoutService
from src.utils.i18n import get_translated_message

logger = get_logger(__name__)
router = APIRouter()


async def _read_payload(request: Request) -> LogoutRequest:
    """A missing or malformed body means "log out this session only"."""
    body = await request.body()
    if not body:
        return LogoutRequest()
    try:
        return LogoutRequest.model_validate_json(body)
    except (JSONDecodeError, UnicodeDecodeError, PayloadValidationError):
        return LogoutRequest()


@router.post(
    "",
    response_model=MessageResponse,
    status_code=status.HTTP_200_OK,
    tags=["auth"],
    summary="Log out the current session or every session",
    responses={200: {"description": "Always returned, even if cleanup partly failed"}},
    openapi_extra={
        "requestBody": {
            "required": False,
            "content": {"application/json": {"schema": LogoutRequest.model_json_schema()}},
        }
    },
)
async def logout(
    request: Request,
    authorization: Optional[str] = Header(default=None),
    logout_service: LogoutService = Depends(get_logout_service),
) -> MessageResponse:
    """Revoke the caller's session, or all of their sessions.

    Args:
        request: FastAPI request object, read for the optional JSON body.
        authorization: Optional bearer token of the session to revoke.
        logout_service: Domain logout service.

    Returns:
        MessageResponse: Translated success message.
    """
    language = getattr(request.state, "language", "en")
    payload = await _read_payload(request)

    try:
        result = await logout_service.logout(authorization, all_sessions=payload.all_sessions)
        if not result.clean:
            await logger.awarning(
                "Logout completed with cleanup failures",
                user_id=result.user_id,
                scope=result.scope,
                failures=[str(failure) for failure in result.failures],
            )
    except Exception as e:
        # Even if there's an error, we still return success to redirect to signin page
        await logger.aerror(
            "Unexpected error during logout request",
            error_type=type(e).__name__,
            error_message=str(e),
        )

    return MessageResponse(message=get_translated_message("logout_successful", language))

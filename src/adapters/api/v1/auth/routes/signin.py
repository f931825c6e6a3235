"""Sign-in endpoint.

Checks credentials, issues a server-side session and returns a bearer token
embedding that session's id. The API layer stays thin: the credential check,
session bookkeeping and token signing all live in domain services, and domain
exceptions are mapped to HTTP statuses by the global handlers.
"""

from json import JSONDecodeError

import structlog
from fastapi import APIRouter, Depends, Request, status
from pydantic import ValidationError as PayloadValidationError

from src.adapters.api.v1.auth.dependencies import (
    get_session_service,
    get_token_service,
    get_user_auth_service,
)
from src.adapters.api.v1.auth.schemas import SignInRequest, SignInResponse, SignInUser
from src.core.exceptions import InvalidCredentialsError
from src.domain.services.auth.session import SessionService
from src.domain.services.auth.token import TokenService
from src.domain.services.auth.user_authentication import UserAuthenticationService
from src.utils.client_info import extract_client_address, extract_device_info
from src.utils.i18n import get_translated_message

logger = structlog.get_logger(__name__)
router = APIRouter()


async def _read_payload(request: Request, language: str) -> SignInRequest:
    """Parse the body so that a malformed payload is a *400*, not a *422*."""
    try:
        return SignInRequest.model_validate(await request.json())
    except (JSONDecodeError, UnicodeDecodeError, PayloadValidationError) as exc:
        raise InvalidCredentialsError(
            get_translated_message("signin_invalid_payload", language), "invalid_payload"
        ) from exc


@router.post(
    "",
    response_model=SignInResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["auth"],
    summary="Sign in with email and password",
    description=(
        "Authenticates a user by email and password, creates a server-side session "
        "and returns a bearer token bound to it."
    ),
    responses={
        400: {"description": "Malformed payload or blank password"},
        403: {"description": "Password not set or incorrect"},
        404: {"description": "No account with this email"},
        500: {"description": "Session could not be created"},
    },
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": SignInRequest.model_json_schema()}},
        }
    },
)
async def signin(
    request: Request,
    auth_service: UserAuthenticationService = Depends(get_user_auth_service),
    session_service: SessionService = Depends(get_session_service),
    token_service: TokenService = Depends(get_token_service),
) -> SignInResponse:
    """Authenticate a user and open a session.

    Flow:
    1. Validate the payload and normalise the email
    2. Check the credentials against the user store
    3. Create a session tagged with the device label and client address
    4. Sign a token whose lifetime matches the session's

    Raises:
        InvalidCredentialsError: Malformed payload or blank password (400).
        UserNotFoundError: Unknown email (404).
        PermissionError: Password unset or incorrect (403).
        SessionCreationError: Session store failure (500).
    """
    language = getattr(request.state, "language", "en")
    payload = await _read_payload(request, language)

    user = await auth_service.authenticate_by_credentials(payload.email, payload.password, language)

    session_id = await session_service.create_session(
        user.user_id,
        device_info=extract_device_info(request.headers.get("user-agent")),
        ip_address=extract_client_address(request),
    )
    token = token_service.create_access_token(
        user.user_id, session_id, email=user.email, org_id=user.org_id
    )

    await logger.ainfo("User signed in", user_id=user.user_id, org_id=user.org_id)

    return SignInResponse(
        token=token,
        user=SignInUser(
            user_id=user.user_id,
            email=user.email,
            org_id=user.org_id,
            session_id=session_id,
        ),
    )

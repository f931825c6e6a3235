from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from structlog import get_logger

from src.core.exceptions import (
    InvalidCredentialsError,
    PermissionError,
    UserNotFoundError,
)
from src.domain.entities.user import User
from src.infrastructure.database.errors import STORE_ERRORS, translate_database_error
from src.utils.i18n import get_translated_message
from src.utils.security import verify_password

logger = get_logger(__name__)

# Roles allowed to sign in to this application.
SIGNIN_ROLE_IDS = (0, 1)


class UserAuthenticationService:
    """
    Credential check at the sign-in boundary.

    Looks the account up by email among the roles allowed to sign in and
    verifies the bcrypt hash. Sessions and tokens are issued by the caller
    once this succeeds.

    Attributes:
        db_session (AsyncSession): SQLModel async session for user lookups.
    """

    def __init__(self, db_session: AsyncSession):
        self.db_session = db_session

    async def authenticate_by_credentials(
        self, email: str, password: str, language: str = "en"
    ) -> User:
        """
        Authenticate a user by email and password.

        Args:
            email (str): Email as typed; trimmed and lower-cased here.
            password (str): Password as typed; surrounding whitespace is ignored.
            language (str): Language for error messages.

        Returns:
            User: The authenticated user.

        Raises:
            InvalidCredentialsError: If the password is blank after trimming.
            UserNotFoundError: If no sign-in capable account uses this email.
            PermissionError: If the account has no password set or the
                password does not match.
            DatabaseError: If the store could not answer the lookup.
        """
        email = (email or "").strip().lower()
        password = (password or "").strip()
        if not password:
            raise InvalidCredentialsError(get_translated_message("signin_password_empty", language))

        try:
            result = await self.db_session.exec(
                select(User).where(User.email == email, User.role_id.in_(SIGNIN_ROLE_IDS))
            )
            user = result.first()
        except STORE_ERRORS as exc:
            error = translate_database_error(exc)
            await logger.aerror("Sign-in lookup failed", error=error.message)
            raise error from exc

        if user is None:
            logger.warning("Sign-in attempt for unknown account", email_domain=email.partition("@")[2])
            raise UserNotFoundError(get_translated_message("signin_account_not_found", language))

        if not user.hashed_password:
            raise PermissionError(
                get_translated_message("signin_password_not_set", language), "password_not_set"
            )

        if not verify_password(password, user.hashed_password):
            logger.warning("Invalid password", user_id=user.user_id)
            raise PermissionError(
                get_translated_message("signin_password_incorrect", language), "password_incorrect"
            )

        return user

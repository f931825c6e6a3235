"""Authentication and token-signing settings.
"""

import logging

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)


class AuthSettings(BaseSettings):
    """Defines settings for bearer token signing and password verification.

    Security Note:
        - JWT_SECRET_KEY must be a cryptographically secure random string of at
          least 32 characters and must never be logged or committed.
        - BCRYPT_WORK_FACTOR only applies when hashing new passwords; existing
          hashes carry their own cost.
    """

    JWT_SECRET_KEY: SecretStr
    JWT_ALGORITHM: str = "HS256"
    BCRYPT_WORK_FACTOR: int = Field(ge=4, le=31, default=12)

    @field_validator("JWT_SECRET_KEY")
    @classmethod
    def _validate_secret_length(cls, v: SecretStr) -> SecretStr:
        if len(v.get_secret_value()) < 32:
            error_msg = "JWT_SECRET_KEY must be at least 32 characters long."
            logger.error(error_msg)
            raise ValueError(error_msg)
        return v

"""Security utilities for password hashing and log-safe identifiers.

Password hashing is an external primitive for this service: sign-in only
verifies against stored bcrypt hashes, and `hash_password` exists for seeding
accounts and for tests.
"""

from passlib.context import CryptContext

from src.core.config.settings import settings

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_WORK_FACTOR,
)


def hash_password(password: str) -> str:
    """Hash a password using bcrypt.

    Args:
        password: Plain text password to hash

    Returns:
        str: Bcrypt-hashed password
    """
    return pwd_context.hash(password)


def verify_password(password: str, hashed_password: str) -> bool:
    """Verify a password against its hash.

    Malformed or foreign hashes are reported as a mismatch rather than an
    error, so a corrupted row can never authenticate.

    Args:
        password: Plain text password to verify
        hashed_password: Bcrypt hash to verify against

    Returns:
        bool: True if password matches hash
    """
    try:
        return pwd_context.verify(password, hashed_password)
    except (ValueError, TypeError):
        return False


def mask_identifier(value: str | None, visible: int = 8) -> str:
    """Return a log-safe prefix of a session id or token."""
    if not value:
        return ""
    if len(value) <= visible:
        return "***"
    return f"{value[:visible]}***"

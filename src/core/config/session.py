"""Session lifecycle settings."""

from pydantic import Field
from pydantic_settings import BaseSettings


class SessionSettings(BaseSettings):
    """Limits and timings for server-side sessions.

    MAX_SESSIONS_PER_USER is enforced at creation time only: when a user
    already holds that many valid sessions, the least-recently-active ones are
    soft-deleted before the new session is inserted.
    """

    SESSION_TTL_HOURS: int = Field(ge=1, default=24)
    MAX_SESSIONS_PER_USER: int = Field(ge=1, default=5)
    SESSION_CLEANUP_INTERVAL_MINUTES: int = Field(ge=0, default=60)

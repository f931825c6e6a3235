from datetime import datetime  # For timestamp fields
from typing import Optional  # For optional fields

from sqlalchemy import Boolean, DateTime  # Explicit column types for Alembic
from sqlmodel import Column, Field, Index, SQLModel  # For ORM and table definition

from src.utils.timezone import as_utc, utc_now


class UserSession(SQLModel, table=True):
    """Represents one authenticated login, tracked server-side.

    A session is independently revocable from the bearer token that references
    it: the token only carries `session_id`, and every protected request asks
    the session store whether that id is still valid.

    Attributes:
        session_id: Opaque 256-bit random identifier, hex-encoded. Generated at
            creation and never reused.
        user_id: Identifier of the owning user, treated as an opaque string.
        device_info: Human-readable device label derived from the User-Agent.
        ip_address: Origin network address of the sign-in request.
        is_active: Soft-delete flag. Cleared on logout or limit eviction and
            never set again.
        created_at: When the session was issued.
        last_active: Last successful validation. Monotonically non-decreasing
            and used to pick eviction victims.
        expires_at: Absolute expiry. A session is valid only while
            `is_active` is true and this is strictly in the future.
    """

    __tablename__ = "user_sessions"  # Explicit table name for clarity

    session_id: str = Field(
        primary_key=True,  # Lookup key for every validation
        max_length=64,  # 32 random bytes, hex-encoded
        description="Opaque, globally unique session identifier.",
    )
    user_id: str = Field(
        index=True,  # Per-user limit enforcement and cleanup
        nullable=False,
        max_length=64,
        description="Identifier of the user owning the session.",
    )
    device_info: Optional[str] = Field(
        default=None,
        max_length=64,
        description="Device label derived from the client User-Agent.",
    )
    ip_address: Optional[str] = Field(
        default=None,
        max_length=64,
        description="Origin network address of the sign-in request.",
    )
    is_active: bool = Field(
        default=True,
        sa_column=Column(Boolean, nullable=False, default=True),
        description="False once the session has been logged out or evicted.",
    )
    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False),
        description="The timestamp when the session was issued.",
    )
    last_active: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False),
        description="Timestamp of the last successful validation.",
    )
    expires_at: datetime = Field(
        sa_column=Column(DateTime(timezone=True), nullable=False),
        description="The timestamp after which the session is no longer valid.",
    )

    __table_args__ = (
        Index(
            "ix_user_sessions_user_id_active_expires", "user_id", "is_active", "expires_at"
        ),  # Index for valid-session queries
        Index("ix_user_sessions_last_active", "last_active"),  # Eviction ordering
        {"extend_existing": True},
    )

    def is_valid(self, now: Optional[datetime] = None) -> bool:
        """True while the session is active and not yet expired."""
        now = now or utc_now()
        return bool(self.is_active) and as_utc(self.expires_at) > now

    def touch(self, now: Optional[datetime] = None) -> None:
        """Record activity without ever moving `last_active` backwards."""
        now = now or utc_now()
        previous = as_utc(self.last_active)
        self.last_active = now if previous is None or now > previous else previous

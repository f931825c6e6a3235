from datetime import datetime  # For timestamp fields
from typing import Optional  # For optional fields

from sqlalchemy import DateTime  # Explicit DateTime type for Alembic
from sqlmodel import Column, Field, SQLModel, String  # For ORM and table definition


class User(SQLModel, table=True):
    """The user account as seen by the session subsystem.

    Only the columns needed at the sign-in boundary and for session
    bookkeeping are modelled here; everything else about users belongs to
    other parts of the product.

    Attributes:
        user_id: Opaque string identifier.
        email: Unique, lower-cased email used to sign in.
        hashed_password: Bcrypt hash. Null when no password was ever set.
        org_id: Organisation the user belongs to, echoed into the token.
        role_id: 0 or 1 for accounts allowed to sign in here.
        last_login: Timestamp of the most recent session creation.
        active_sessions_count: Denormalized number of valid sessions, refreshed
            on session creation and reset on "log out everywhere".
    """

    __tablename__ = "users"  # Explicit table name for clarity

    user_id: str = Field(
        primary_key=True,
        max_length=64,
        description="Opaque user identifier.",
    )
    email: str = Field(
        sa_column=Column(String, unique=True, index=True, nullable=False),  # Unique, indexed column
        description="Unique, lower-cased email address used to sign in.",
    )
    hashed_password: Optional[str] = Field(
        default=None,
        max_length=255,  # Sufficient for bcrypt hashes
        description="Bcrypt-hashed password.",
    )
    org_id: Optional[str] = Field(
        default=None,
        max_length=64,
        description="Organisation identifier embedded in issued tokens.",
    )
    role_id: int = Field(
        default=1,
        description="Role identifier; 0 and 1 may sign in.",
    )
    last_login: Optional[datetime] = Field(
        default=None,
        sa_column=Column(DateTime(timezone=True), nullable=True),
        description="Timestamp of the most recent session creation.",
    )
    active_sessions_count: int = Field(
        default=0,
        description="Denormalized count of currently valid sessions.",
    )

    __table_args__ = ({"extend_existing": True},)

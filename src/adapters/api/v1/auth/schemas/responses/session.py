from __future__ import annotations

"""Response models for session validation and listing."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel

from src.domain.entities.session import UserSession
from src.utils.timezone import as_utc


class SessionValidationResponse(BaseModel):
    """Body of ``POST /auth/validate-session``.

    Optional fields are omitted from the wire when unset.
    """

    valid: bool
    reason: str
    session_id: Optional[str] = None
    user_id: Optional[str] = None
    expires_at: Optional[datetime] = None
    legacy: Optional[bool] = None


class SessionOut(BaseModel):
    """Serialised representation of :class:`~src.domain.entities.session.UserSession`."""

    session_id: str
    device_info: Optional[str] = None
    ip_address: Optional[str] = None
    created_at: datetime
    last_active: datetime
    expires_at: datetime
    current: bool = False

    @classmethod
    def from_entity(cls, session: UserSession, current_session_id: Optional[str]) -> "SessionOut":
        return cls(
            session_id=session.session_id,
            device_info=session.device_info,
            ip_address=session.ip_address,
            created_at=as_utc(session.created_at),
            last_active=as_utc(session.last_active),
            expires_at=as_utc(session.expires_at),
            current=session.session_id == current_session_id,
        )


class SessionListResponse(BaseModel):
    sessions: List[SessionOut]

from __future__ import annotations

"""Authentication router package – bundles sign-in, session and logout endpoints."""

from fastapi import APIRouter

from .routes import logout as logout_route
from .routes import sessions as sessions_route
from .routes import signin as signin_route
from .routes import validate_session as validate_session_route

router = APIRouter(prefix="/auth", tags=["auth"])

# Delegate to sub-routers ----------------------------------------------------

router.include_router(signin_route.router, prefix="/signin")
router.include_router(validate_session_route.router, prefix="/validate-session")
router.include_router(logout_route.router, prefix="/logout")
router.include_router(sessions_route.router, prefix="/sessions")

__all__ = ["router"]

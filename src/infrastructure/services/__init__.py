"""Infrastructure services: background jobs bound to the session store."""

from .session_cleanup import SessionCleanupScheduler

__all__ = ["SessionCleanupScheduler"]

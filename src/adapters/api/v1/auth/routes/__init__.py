from __future__ import annotations

"""Subpackage aggregating individual auth route modules."""

__all__ = [
    "signin",
    "validate_session",
    "logout",
    "sessions",
]

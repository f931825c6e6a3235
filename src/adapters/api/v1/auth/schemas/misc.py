from __future__ import annotations

"""Miscellaneous utility schemas used by the auth API."""

from pydantic import BaseModel


class MessageResponse(BaseModel):
    """Simple envelope used for *200* acknowledgments."""

    status: str = "success"
    message: str

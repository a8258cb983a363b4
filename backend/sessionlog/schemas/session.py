"""
SessionLog Backend — Session Request/Response Schemas
=======================================================

What:  Pydantic models defining the API contract of /api/sessions.
How:   `SessionWrite` validates create/upsert bodies and patched documents;
       `SessionRead` serializes ORM rows into responses.

Why `extra="forbid"` on the write schema:
    An unknown key in a body (or one added by a patch) is a caller mistake,
    not something to drop silently.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class SessionWrite(BaseModel):
    """Fields a caller may set on a session."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=1, max_length=255, description="Display name of the session")
    description: Optional[str] = Field(default=None, description="Free-form notes")
    active: bool = Field(default=True, description="Whether the session is still open")


class SessionRead(BaseModel):
    """Full representation of a stored session."""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(description="Store-assigned identifier")
    name: str
    description: Optional[str] = None
    active: bool
    created_at: datetime = Field(description="When the session was created (UTC)")

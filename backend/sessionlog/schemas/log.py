"""
SessionLog Backend — Log Request/Response Schemas
===================================================

What:  Pydantic models defining the API contract of /api/logs.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

LOG_LEVELS = ("debug", "info", "warning", "error", "critical")


class LogWrite(BaseModel):
    """Fields a caller may set on a log line."""

    model_config = ConfigDict(extra="forbid")

    session_id: Optional[int] = Field(default=None, description="Owning session, if any")
    level: str = Field(default="info", description=f"One of: {', '.join(LOG_LEVELS)}")
    message: str = Field(min_length=1, description="The log text")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Normalizes the level to lowercase and rejects unknown names."""
        lower = v.lower()
        if lower not in LOG_LEVELS:
            raise ValueError(f"Invalid level '{v}'. Must be one of: {', '.join(LOG_LEVELS)}")
        return lower


class LogRead(BaseModel):
    """Full representation of a stored log line."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    session_id: Optional[int] = None
    level: str
    message: str
    created_at: datetime

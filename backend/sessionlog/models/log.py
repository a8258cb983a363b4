"""
SessionLog Backend — Log SQLAlchemy Model
===========================================

What:  ORM model representing the `logs` table.
Who:   Used by SqlAlchemyStore (through the `logs` Resource) and by Alembic.

Table Design:
    - session_id: optional link to a session; deleting the session deletes
      its log lines (ON DELETE CASCADE, enforced by PostgreSQL)
    - level: short enum-like value validated at the API layer
    - created_at: write-once timestamp; there is no updated_at column

    Index on (session_id, created_at):
        Optimizes "all log lines of a session, oldest first"
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from sessionlog.database import Base


class Log(Base):
    """One log line, optionally attached to a Session."""

    __tablename__ = "logs"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    session_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("sessions.id", ondelete="CASCADE"),
        nullable=True,
        default=None,
    )

    level: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="info",
        server_default=text("'info'"),
    )

    message: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        Index("idx_logs_session_created_at", "session_id", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Log(id={self.id}, session_id={self.session_id}, level='{self.level}')>"

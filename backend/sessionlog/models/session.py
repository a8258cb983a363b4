"""
SessionLog Backend — Session SQLAlchemy Model
===============================================

What:  ORM model representing the `sessions` table.
Who:   Used by SqlAlchemyStore (through the `sessions` Resource) and by
       Alembic for schema management.

Table Design:
    - Integer autoincrement primary key: ids are assigned by the store on
      insert; callers never choose them except through Upsert
    - created_at: set once at insert, never written by the controller
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Boolean, DateTime, Integer, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from sessionlog.database import Base


class Session(Base):
    """
    A named work session that log lines can be attached to.

    Lifecycle:
        Created by POST /api/sessions or PUT /api/sessions/{id},
        mutated by PUT or PATCH, removed by DELETE.
    """

    __tablename__ = "sessions"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    description: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        default=None,
    )

    active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        server_default=text("true"),
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    def __repr__(self) -> str:
        return f"<Session(id={self.id}, name='{self.name}', active={self.active})>"

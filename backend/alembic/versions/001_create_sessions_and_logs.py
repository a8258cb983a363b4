"""Create sessions and logs tables

Revision ID: 001
Revises: None
Create Date: 2026-10-18 00:00:00.000000+00:00

What:  Creates the `sessions` table and the `logs` table that references it.
How:   Integer identity keys (the store assigns ids; PUT may choose one),
       TIMESTAMP WITH TIME ZONE for created_at.

Rollback: downgrade() drops both tables (destructive, all data lost).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create both tables; see sessionlog/models/ for column docs."""
    op.create_table(
        "sessions",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column(
            "name",
            sa.String(255),
            nullable=False,
            comment="Display name of the session",
        ),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column(
            "active",
            sa.Boolean(),
            nullable=False,
            server_default=sa.text("true"),
            comment="Whether the session is still open",
        ),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
            comment="Set once at insert (UTC)",
        ),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "logs",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("session_id", sa.Integer(), nullable=True),
        sa.Column(
            "level",
            sa.String(20),
            nullable=False,
            server_default=sa.text("'info'"),
            comment="debug, info, warning, error or critical",
        ),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(["session_id"], ["sessions.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )

    # "Lines of one session, in order" is the common read
    op.create_index(
        "idx_logs_session_created_at",
        "logs",
        ["session_id", "created_at"],
    )


def downgrade() -> None:
    """Drop both tables, children first."""
    op.drop_index("idx_logs_session_created_at", table_name="logs")
    op.drop_table("logs")
    op.drop_table("sessions")

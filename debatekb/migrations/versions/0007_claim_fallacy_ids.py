"""Add claims.fallacy_ids (JSON list, default []).

Revision ID: 0007
Revises: 0006
Create Date: 2026-01-09
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "0007"
down_revision: Union[str, None] = "0006"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.add_column(
        "claims",
        sa.Column("fallacy_ids", sa.Text, nullable=False, server_default="[]"),
    )


def downgrade() -> None:
    op.drop_column("claims", "fallacy_ids")

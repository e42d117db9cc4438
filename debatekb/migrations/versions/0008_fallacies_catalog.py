"""Create the fallacies table and seed the static catalog.

Revision ID: 0008
Revises: 0007
Create Date: 2026-01-16

Catalog rows keep their slug ids (e.g. "ad_hominem") and is_custom = 0.
"""
from datetime import datetime, timezone
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

from debatekb.core.fallacy_catalog import CATALOG
from debatekb.core.timestamps import sequential

revision: str = "0008"
down_revision: Union[str, None] = "0007"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    fallacies = op.create_table(
        "fallacies",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("name", sa.Text, nullable=False),
        sa.Column("description", sa.Text, nullable=False, server_default=""),
        sa.Column("example", sa.Text, nullable=False, server_default=""),
        sa.Column("category", sa.String(64), nullable=True),
        sa.Column("is_custom", sa.Boolean, nullable=False, server_default="0"),
        sa.Column("created_at", sa.String(32), nullable=False),
        sa.Column("updated_at", sa.String(32), nullable=False),
    )
    stamps = sequential(datetime.now(timezone.utc), len(CATALOG))
    op.bulk_insert(fallacies, [
        {
            "id": entry.id,
            "name": entry.name,
            "description": entry.description,
            "example": entry.example,
            "category": entry.category,
            "is_custom": False,
            "created_at": ts,
            "updated_at": ts,
        }
        for entry, ts in zip(CATALOG, stamps)
    ])


def downgrade() -> None:
    op.drop_table("fallacies")

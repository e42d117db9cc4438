"""Add missing timestamps with sequential backfill.

Revision ID: 0002
Revises: 0001
Create Date: 2025-11-15

tags gain created_at + updated_at; evidences, sources and questions gain
updated_at. Existing rows are stamped now + i ms in rowid order so no two legacy
rows share a timestamp (updated_at is the merge tie-breaker).
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

from debatekb.migrations import helpers

revision: str = "0002"
down_revision: Union[str, None] = "0001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# table -> columns added by this revision
_ADDED = {
    "tags": ("created_at", "updated_at"),
    "evidences": ("updated_at",),
    "sources": ("updated_at",),
    "questions": ("updated_at",),
}


def upgrade() -> None:
    for table, columns in _ADDED.items():
        for column in columns:
            op.add_column(table, sa.Column(column, sa.String(32), nullable=True))
        helpers.backfill_sequential_timestamps(table, columns)


def downgrade() -> None:
    for table, columns in _ADDED.items():
        for column in columns:
            op.drop_column(table, column)

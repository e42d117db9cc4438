"""Full-text projections for claims, rebuttals and questions.

Revision ID: 0005
Revises: 0004
Create Date: 2025-12-05

External-content FTS5 tables kept in sync by insert/update/delete triggers and
backfilled with 'rebuild'.
"""
from typing import Sequence, Union

from debatekb.migrations import helpers

revision: str = "0005"
down_revision: Union[str, None] = "0004"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

_PROJECTIONS = {
    "claims": ["text"],
    "rebuttals": ["text"],
    "questions": ["text"],
}


def upgrade() -> None:
    for table, columns in _PROJECTIONS.items():
        helpers.create_fts_projection(table, columns)


def downgrade() -> None:
    for table in _PROJECTIONS:
        helpers.drop_fts_projection(table)

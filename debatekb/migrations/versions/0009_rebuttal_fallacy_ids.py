"""Widen rebuttals.fallacy_tag (single) into rebuttals.fallacy_ids (list).

Revision ID: 0009
Revises: 0008
Create Date: 2026-01-23

SQLite cannot retype or rename a column in place, so the table is rebuilt:
create the new shape, copy every row through _widen_row, drop the old table,
rename. The FTS triggers die with the old table and are recreated here.
"""
import json
from typing import Any, Sequence, Union

import sqlalchemy as sa

from debatekb.migrations import helpers

revision: str = "0009"
down_revision: Union[str, None] = "0008"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _widen_row(row: dict[str, Any]) -> dict[str, Any]:
    tag = (row.get("fallacy_tag") or "").strip()
    return {
        "id": row["id"],
        "claim_id": row["claim_id"],
        "text": row["text"],
        "fallacy_ids": json.dumps([tag] if tag else []),
        "created_at": row["created_at"],
        "updated_at": row["updated_at"],
    }


def upgrade() -> None:
    helpers.recreate_table(
        "rebuttals",
        [
            sa.Column("id", sa.String(64), primary_key=True),
            sa.Column(
                "claim_id", sa.String(64),
                sa.ForeignKey("claims.id", ondelete="CASCADE"), nullable=False,
            ),
            sa.Column("text", sa.Text, nullable=False),
            sa.Column("fallacy_ids", sa.Text, nullable=False, server_default="[]"),
            sa.Column("created_at", sa.String(32), nullable=False),
            sa.Column("updated_at", sa.String(32), nullable=False),
        ],
        _widen_row,
        indexes=[("ix_rebuttals_claim_id", ["claim_id"])],
    )
    helpers.create_fts_triggers("rebuttals", ["text"])
    helpers.rebuild_fts("rebuttals")


def downgrade() -> None:
    raise NotImplementedError("rebuttals.fallacy_ids cannot be narrowed losslessly")

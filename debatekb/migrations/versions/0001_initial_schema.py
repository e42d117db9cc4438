"""Initial schema — topics, claims, rebuttals, evidences, questions, sources, tags.

Revision ID: 0001
Revises: None
Create Date: 2025-11-08

Version 1 stores: tags have no timestamps; evidences, sources and questions have
created_at only; rebuttals carry a single nullable fallacy_tag.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "topics",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("title", sa.Text, nullable=False),
        sa.Column("summary", sa.Text, nullable=False, server_default=""),
        sa.Column("posture", sa.String(32), nullable=False, server_default="neutral_critique"),
        sa.Column("tags", sa.Text, nullable=False, server_default="[]"),
        sa.Column("created_at", sa.String(32), nullable=False),
        sa.Column("updated_at", sa.String(32), nullable=False),
    )

    op.create_table(
        "claims",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("text", sa.Text, nullable=False),
        sa.Column("stance", sa.String(32), nullable=False, server_default="neutral"),
        sa.Column("strength", sa.String(32), nullable=False, server_default="medium"),
        sa.Column("topics", sa.Text, nullable=False, server_default="[]"),
        sa.Column("fingerprint", sa.String(16), nullable=False),
        sa.Column("created_at", sa.String(32), nullable=False),
        sa.Column("updated_at", sa.String(32), nullable=False),
    )

    op.create_table(
        "rebuttals",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column(
            "claim_id", sa.String(64),
            sa.ForeignKey("claims.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("text", sa.Text, nullable=False),
        sa.Column("fallacy_tag", sa.String(64), nullable=True),
        sa.Column("created_at", sa.String(32), nullable=False),
        sa.Column("updated_at", sa.String(32), nullable=False),
    )
    op.create_index("ix_rebuttals_claim_id", "rebuttals", ["claim_id"])

    op.create_table(
        "sources",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("title", sa.Text, nullable=False),
        sa.Column("citation", sa.Text, nullable=True),
        sa.Column("url", sa.Text, nullable=True),
        sa.Column("publisher", sa.Text, nullable=True),
        sa.Column("date", sa.String(32), nullable=True),
        sa.Column("notes", sa.Text, nullable=True),
        sa.Column("reliability_score", sa.Float, nullable=True),
        sa.Column("created_at", sa.String(32), nullable=False),
    )

    op.create_table(
        "evidences",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column(
            "claim_id", sa.String(64),
            sa.ForeignKey("claims.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("content", sa.Text, nullable=False),
        sa.Column("type", sa.String(32), nullable=False, server_default="example"),
        sa.Column("quality", sa.String(32), nullable=False, server_default="medium"),
        sa.Column(
            "source_id", sa.String(64),
            sa.ForeignKey("sources.id", ondelete="SET NULL"), nullable=True,
        ),
        sa.Column("created_at", sa.String(32), nullable=False),
    )
    op.create_index("ix_evidences_claim_id", "evidences", ["claim_id"])
    op.create_index("ix_evidences_source_id", "evidences", ["source_id"])

    op.create_table(
        "questions",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("target_id", sa.String(64), nullable=False),
        sa.Column("text", sa.Text, nullable=False),
        sa.Column("kind", sa.String(32), nullable=False, server_default="clarifying"),
        sa.Column("created_at", sa.String(32), nullable=False),
    )
    op.create_index("ix_questions_target_id", "questions", ["target_id"])

    op.create_table(
        "tags",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("label", sa.Text, nullable=False),
        sa.Column("color", sa.String(32), nullable=True),
    )


def downgrade() -> None:
    for table in ("tags", "questions", "evidences", "sources", "rebuttals", "claims", "topics"):
        op.drop_table(table)

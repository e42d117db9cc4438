"""Fingerprint topics and sources; index tags.label.

Revision ID: 0010
Revises: 0009
Create Date: 2026-02-06

Existing rows are backfilled with the same functions the repositories use,
so imports dedup against legacy rows from the first run.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

from debatekb.core.fingerprint import source_fingerprint, topic_fingerprint
from debatekb.db.types import decode_string_list

revision: str = "0010"
down_revision: Union[str, None] = "0009"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.add_column("topics", sa.Column("fingerprint", sa.String(16), nullable=True))
    op.add_column("sources", sa.Column("fingerprint", sa.String(16), nullable=True))

    bind = op.get_bind()
    topics = bind.execute(sa.text("SELECT id, title, tags FROM topics")).all()
    if topics:
        bind.execute(
            sa.text("UPDATE topics SET fingerprint = :fp WHERE id = :id"),
            [
                {"id": t.id, "fp": topic_fingerprint(t.title, decode_string_list(t.tags))}
                for t in topics
            ],
        )
    sources = bind.execute(
        sa.text("SELECT id, title, publisher, date, url FROM sources"),
    ).all()
    if sources:
        bind.execute(
            sa.text("UPDATE sources SET fingerprint = :fp WHERE id = :id"),
            [
                {"id": s.id, "fp": source_fingerprint(s.title, s.publisher, s.date, s.url)}
                for s in sources
            ],
        )

    op.create_index("ix_topics_fingerprint", "topics", ["fingerprint"])
    op.create_index("ix_sources_fingerprint", "sources", ["fingerprint"])
    op.create_index("ix_tags_label", "tags", ["label"])


def downgrade() -> None:
    op.drop_index("ix_tags_label", table_name="tags")
    op.drop_index("ix_sources_fingerprint", table_name="sources")
    op.drop_index("ix_topics_fingerprint", table_name="topics")
    op.drop_column("sources", "fingerprint")
    op.drop_column("topics", "fingerprint")

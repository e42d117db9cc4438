"""Full-text projection for sources (title, citation).

Revision ID: 0006
Revises: 0005
Create Date: 2025-12-12
"""
from typing import Sequence, Union

from debatekb.migrations import helpers

revision: str = "0006"
down_revision: Union[str, None] = "0005"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    helpers.create_fts_projection("sources", ["title", "citation"])


def downgrade() -> None:
    helpers.drop_fts_projection("sources")

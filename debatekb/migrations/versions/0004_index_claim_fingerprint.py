"""Index claims.fingerprint for duplicate lookups.

Revision ID: 0004
Revises: 0003
Create Date: 2025-11-28

Non-unique: the same normalized text may appear under different topics.
"""
from typing import Sequence, Union

from alembic import op

revision: str = "0004"
down_revision: Union[str, None] = "0003"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_index("ix_claims_fingerprint", "claims", ["fingerprint"])


def downgrade() -> None:
    op.drop_index("ix_claims_fingerprint", table_name="claims")

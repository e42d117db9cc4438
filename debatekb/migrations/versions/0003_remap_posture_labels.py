"""Remap legacy posture labels to canonical tokens.

Revision ID: 0003
Revises: 0002
Create Date: 2025-11-20

"neutral_critique"/"neutre_critique" -> "neutral_critical", "sceptique" ->
"skeptical", "comparatif_academique" -> "academic_comparative". Readers keep
accepting the old labels (Posture.parse), so older snapshots still import.
"""
from typing import Sequence, Union

from alembic import op

from debatekb.core.domain_types import LEGACY_POSTURE_LABELS
from debatekb.migrations import helpers

revision: str = "0003"
down_revision: Union[str, None] = "0002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    helpers.remap_values("topics", "posture", LEGACY_POSTURE_LABELS)


def downgrade() -> None:
    # Several legacy labels collapse into one; canonical values stay readable anyway
    pass

"""Alembic migration scripts for the debatekb store (revisions 0001..0010)."""

from pathlib import Path

MIGRATIONS_DIR = Path(__file__).resolve().parent

"""Persistence Primitives — SQLAlchemy Base, entity mixin and column types.

Invariants:
    - Every entity table carries id, created_at, updated_at (EntityMixin)
    - Enum columns write strictly and read leniently (db/types.py)

Design Decisions:
    - Engine/session lifecycle lives in infrastructure/database.py; this package
      only describes table shapes
"""

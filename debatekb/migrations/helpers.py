"""Migration Helpers — reusable data transformations for revision scripts.

Invariants:
    - Every helper runs on op.get_bind(), i.e. inside the step's transaction:
      a failure anywhere in a step leaves neither schema nor data changed
    - recreate_table() is lossless for every column the transform returns
    - FTS projections are external-content FTS5 tables kept in sync by triggers;
      create_fts_projection() always ends with a 'rebuild'

Design Decisions:
    - Revision scripts call these through the module (helpers.fn), so tests can
      substitute a failing helper and observe step atomicity
    - Table/column names are interpolated from revision-script literals only,
      never from data
"""

import logging
from collections.abc import Callable, Iterable, Mapping
from datetime import datetime, timezone
from typing import Any

import sqlalchemy as sa
from alembic import op

from debatekb.core.timestamps import sequential

logger = logging.getLogger(__name__)

COPY_BATCH_SIZE = 500


def backfill_sequential_timestamps(
    table: str,
    columns: Iterable[str],
    base: datetime | None = None,
) -> int:
    """Give rows with NULL timestamps distinct values in rowid order.

    Row i (0-based, by rowid) gets base + i milliseconds in every listed column,
    so legacy rows never share a timestamp and keep their insertion order.
    """
    columns = list(columns)
    bind = op.get_bind()
    null_check = " OR ".join(f"{c} IS NULL" for c in columns)
    rowids = [
        r[0] for r in bind.execute(
            sa.text(f"SELECT rowid FROM {table} WHERE {null_check} ORDER BY rowid"),
        )
    ]
    if not rowids:
        return 0
    stamps = sequential(base or datetime.now(timezone.utc), len(rowids))
    assignments = ", ".join(f"{c} = COALESCE({c}, :ts)" for c in columns)
    statement = sa.text(f"UPDATE {table} SET {assignments} WHERE rowid = :rowid")
    bind.execute(
        statement,
        [{"ts": ts, "rowid": rowid} for rowid, ts in zip(rowids, stamps)],
    )
    logger.info(
        f"Backfilled {len(rowids)} timestamps in {table}",
        extra={"entity_type": table},
    )
    return len(rowids)


def remap_values(table: str, column: str, mapping: Mapping[str, str]) -> int:
    """UPDATE table SET column = new WHERE column = old, for each old -> new."""
    bind = op.get_bind()
    statement = sa.text(f"UPDATE {table} SET {column} = :new WHERE {column} = :old")
    changed = 0
    for old, new in mapping.items():
        changed += bind.execute(statement, {"old": old, "new": new}).rowcount
    logger.info(f"Remapped {changed} {table}.{column} values", extra={"entity_type": table})
    return changed


def recreate_table(
    table: str,
    columns: list[sa.Column],
    transform: Callable[[dict[str, Any]], dict[str, Any]],
    indexes: Iterable[tuple[str, list[str]]] = (),
) -> int:
    """Rebuild `table` with a new shape: create, stream-copy, drop, rename.

    `transform` maps an old row (dict) to a new row (dict keyed by new columns).
    Indexes are recreated after the rename since dropping the old table drops them.
    """
    bind = op.get_bind()
    temp_name = f"{table}__new"
    new_table = op.create_table(temp_name, *columns)

    copied = 0
    result = bind.execute(sa.text(f"SELECT * FROM {table} ORDER BY rowid"))
    for chunk in result.mappings().partitions(COPY_BATCH_SIZE):
        rows = [transform(dict(row)) for row in chunk]
        bind.execute(new_table.insert(), rows)
        copied += len(rows)

    op.drop_table(table)
    op.rename_table(temp_name, table)
    for index_name, index_columns in indexes:
        op.create_index(index_name, table, index_columns)
    logger.info(f"Recreated {table} ({copied} rows copied)", extra={"entity_type": table})
    return copied


# ─── Full-text projections ──────────────────────────────────────

def create_fts_projection(table: str, columns: list[str]) -> None:
    """External-content FTS5 table `<table>_fts` plus sync triggers, then rebuild."""
    fts = f"{table}_fts"
    cols = ", ".join(columns)
    op.execute(
        f"CREATE VIRTUAL TABLE IF NOT EXISTS {fts} USING fts5("
        f"{cols}, content='{table}', content_rowid='rowid')",
    )
    create_fts_triggers(table, columns)
    rebuild_fts(table)


def create_fts_triggers(table: str, columns: list[str]) -> None:
    fts = f"{table}_fts"
    cols = ", ".join(columns)
    new_vals = ", ".join(f"new.{c}" for c in columns)
    old_vals = ", ".join(f"old.{c}" for c in columns)
    op.execute(
        f"CREATE TRIGGER IF NOT EXISTS {table}_fts_ai AFTER INSERT ON {table} BEGIN "
        f"INSERT INTO {fts}(rowid, {cols}) VALUES (new.rowid, {new_vals}); END",
    )
    op.execute(
        f"CREATE TRIGGER IF NOT EXISTS {table}_fts_ad AFTER DELETE ON {table} BEGIN "
        f"INSERT INTO {fts}({fts}, rowid, {cols}) VALUES ('delete', old.rowid, {old_vals}); END",
    )
    op.execute(
        f"CREATE TRIGGER IF NOT EXISTS {table}_fts_au AFTER UPDATE ON {table} BEGIN "
        f"INSERT INTO {fts}({fts}, rowid, {cols}) VALUES ('delete', old.rowid, {old_vals}); "
        f"INSERT INTO {fts}(rowid, {cols}) VALUES (new.rowid, {new_vals}); END",
    )


def drop_fts_triggers(table: str) -> None:
    for suffix in ("ai", "ad", "au"):
        op.execute(f"DROP TRIGGER IF EXISTS {table}_fts_{suffix}")


def drop_fts_projection(table: str) -> None:
    drop_fts_triggers(table)
    op.execute(f"DROP TABLE IF EXISTS {table}_fts")


def rebuild_fts(table: str) -> None:
    fts = f"{table}_fts"
    op.execute(f"INSERT INTO {fts}({fts}) VALUES ('rebuild')")

# Overview: Idempotent loader for the fixed reference rows in seed_data.

"""
Seed loader.

Seed rows are declared as "this row must exist with this id" rather than as
inserts: apply_seed_data() looks up which ids are already present and inserts
only the missing ones. Running it twice, or after the seed migration already
ran, changes nothing.

The loader works on a plain SQLAlchemy Connection with lightweight table
constructs, so the same code runs inside an Alembic migration (op.get_bind())
and inside the application (db.session.connection()).
"""
from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal
from typing import Callable, Iterable, Optional

import sqlalchemy as sa

from .. import seed_data
from ..time_utils import utcnow
from .auth_service import hash_password

logger = logging.getLogger(__name__)

# (table, rows, timestamp columns) in foreign-key order
SEED_PLAN = (
    ("categories", seed_data.CATEGORIES, ("created_at",)),
    ("users", seed_data.USERS, ("created_at",)),
    ("settings", seed_data.SETTINGS, ("updated_at",)),
    ("products", seed_data.PRODUCTS, ("created_at", "updated_at")),
    ("customers", seed_data.CUSTOMERS, ("created_at",)),
)


def _column_type(value) -> sa.types.TypeEngine:
    if isinstance(value, bool):
        return sa.Boolean()
    if isinstance(value, int):
        return sa.Integer()
    if isinstance(value, Decimal):
        return sa.Numeric(18, 3, asdecimal=True)
    if isinstance(value, datetime):
        return sa.DateTime()
    return sa.String()


def _lightweight_table(name: str, row: dict) -> sa.sql.expression.TableClause:
    return sa.table(name, *(sa.column(key, _column_type(value)) for key, value in row.items()))


def existing_ids(connection: sa.engine.Connection, table_name: str, ids: Iterable[int]) -> set[int]:
    ids = list(ids)
    if not ids:
        return set()
    table = sa.table(table_name, sa.column("id", sa.Integer()))
    result = connection.execute(sa.select(table.c.id).where(table.c.id.in_(ids)))
    return {row[0] for row in result}


def ensure_rows(
    connection: sa.engine.Connection,
    table_name: str,
    rows: list[dict],
    *,
    timestamp_columns: Iterable[str] = (),
    prepare: Optional[Callable[[dict], dict]] = None,
) -> int:
    """
    Insert each row whose id is not present yet. Returns the number inserted.

    Existing rows are left untouched, so store staff edits (stock levels,
    settings values) survive re-seeding.
    """
    present = existing_ids(connection, table_name, (row["id"] for row in rows))
    missing = [row for row in rows if row["id"] not in present]
    if not missing:
        return 0

    now = utcnow()
    to_insert = []
    for row in missing:
        values = dict(row)
        for column in timestamp_columns:
            values.setdefault(column, now)
        if prepare is not None:
            values = prepare(values)
        to_insert.append(values)

    table = _lightweight_table(table_name, to_insert[0])
    connection.execute(table.insert(), to_insert)
    _advance_sequence(connection, table_name)
    return len(to_insert)


def _advance_sequence(connection: sa.engine.Connection, table_name: str) -> None:
    """Explicit ids bypass PostgreSQL sequences; move them past the max id."""
    if connection.dialect.name != "postgresql":
        return
    connection.execute(
        sa.text(
            f"SELECT setval(pg_get_serial_sequence('{table_name}', 'id'), "
            f"(SELECT COALESCE(MAX(id), 1) FROM {table_name}))"
        )
    )


def _with_admin_password(values: dict) -> dict:
    values["password_hash"] = hash_password(seed_data.DEFAULT_ADMIN_PASSWORD)
    return values


def apply_seed_data(connection: sa.engine.Connection) -> dict[str, int]:
    """
    Make sure every reference row exists. Does not commit.

    Returns a {table: inserted_count} summary.
    """
    summary = {}
    for table_name, rows, timestamps in SEED_PLAN:
        prepare = _with_admin_password if table_name == "users" else None
        inserted = ensure_rows(connection, table_name, rows, timestamp_columns=timestamps, prepare=prepare)
        summary[table_name] = inserted
        if inserted:
            logger.info("Seeded %d row(s) into %s", inserted, table_name)
    return summary

# Overview: Database initializer; migrations to head, reference seed, demonstration sale.

"""
Bootstrap helpers run at startup and from `flask system init`.

initialize_database() brings the store to the latest schema version:
- no unapplied migrations -> no-op
- unapplied migrations -> `flask db upgrade` equivalent
- tables created by db.create_all() but never stamped -> stamp head

initialize_database_async() has identical semantics for async callers; the
blocking work runs in a worker thread and the caller awaits completion.

seed_demo_sale() inserts the demonstration invoice KHD000001 when the sales
table is empty. The sale, its line and the customer aggregate update are one
transaction: a missing customer or product leaves nothing behind.
"""
from __future__ import annotations

import asyncio
import logging
import os

import sqlalchemy as sa
from alembic import command as alembic_command
from alembic.runtime.migration import MigrationContext
from alembic.script import ScriptDirectory
from alembic.util import CommandError
from flask import Flask, current_app
from sqlalchemy.exc import SQLAlchemyError

from .. import seed_data
from ..extensions import db
from ..errors import BootstrapError, MissingReferenceError, commit_or_raise
from ..models import Customer, Product, Sale, SaleItem
from ..time_utils import yesterday
from . import sales_service
from .seed_service import apply_seed_data

logger = logging.getLogger(__name__)


def _resolve_app(app: Flask | None) -> Flask:
    return app if app is not None else current_app._get_current_object()


def _migrations_directory(app: Flask) -> str:
    return app.config["MIGRATIONS_DIRECTORY"]


def _alembic_config(app: Flask):
    return app.extensions["migrate"].migrate.get_config(_migrations_directory(app))


def _script_directory(app: Flask) -> ScriptDirectory:
    return ScriptDirectory.from_config(_alembic_config(app))


def _ensure_sqlite_directory(app: Flask) -> None:
    """SQLite creates the file on connect, but not missing parent directories."""
    url = sa.engine.make_url(app.config["SQLALCHEMY_DATABASE_URI"])
    if url.get_backend_name() != "sqlite" or not url.database or url.database == ":memory:":
        return
    path = url.database
    if not os.path.isabs(path):
        path = os.path.join(app.instance_path, path)
    os.makedirs(os.path.dirname(path), exist_ok=True)


def current_revisions() -> tuple[str, ...]:
    with db.engine.connect() as connection:
        context = MigrationContext.configure(connection)
        return tuple(context.get_current_heads())


def _applied_revisions(script: ScriptDirectory, heads) -> set[str]:
    applied: set[str] = set()
    stack = list(heads)
    while stack:
        revision_id = stack.pop()
        if revision_id is None or revision_id in applied:
            continue
        applied.add(revision_id)
        down = script.get_revision(revision_id).down_revision
        if isinstance(down, (tuple, list)):
            stack.extend(down)
        else:
            stack.append(down)
    return applied


def pending_migrations(app: Flask | None = None) -> list[str]:
    """Unapplied revision ids, oldest first."""
    app = _resolve_app(app)
    with app.app_context():
        script = _script_directory(app)
        applied = _applied_revisions(script, current_revisions())
        ordered = reversed(list(script.walk_revisions()))
        return [rev.revision for rev in ordered if rev.revision not in applied]


def _has_unversioned_schema() -> bool:
    """True when every mapped table exists but alembic_version does not."""
    inspector = sa.inspect(db.engine)
    existing = set(inspector.get_table_names())
    if "alembic_version" in existing:
        return False
    return set(db.metadata.tables).issubset(existing)


def initialize_database(app: Flask | None = None) -> list[str]:
    """
    Ensure the database exists and is at the latest schema version.

    Returns the revisions applied (empty when already current).

    Raises:
        BootstrapError: database unreachable or a migration failed
    """
    app = _resolve_app(app)
    with app.app_context():
        try:
            _ensure_sqlite_directory(app)
            with db.engine.connect() as connection:
                connection.execute(sa.text("SELECT 1"))

            pending = pending_migrations(app)
            if not pending:
                logger.info("Database schema is up to date")
                return []

            if _has_unversioned_schema():
                logger.warning("Schema exists without migration history; stamping head")
                _run_alembic(alembic_command.stamp, app)
                return []

            logger.info("Applying %d migration(s): %s", len(pending), ", ".join(pending))
            _run_alembic(alembic_command.upgrade, app)
            return pending
        except (SQLAlchemyError, CommandError, OSError) as exc:
            logger.exception("Database initialization failed")
            raise BootstrapError(f"Database initialization failed: {exc}") from exc


def _run_alembic(command, app: Flask) -> None:
    """Run an Alembic command to head; any error from env.py or a revision script is fatal."""
    try:
        command(_alembic_config(app), "head")
    except (SQLAlchemyError, CommandError, OSError):
        raise
    except Exception as exc:
        logger.exception("Migration script failed")
        raise BootstrapError(f"Database initialization failed: {exc}") from exc


async def initialize_database_async(app: Flask | None = None) -> list[str]:
    """Awaitable initialize_database(); same checks, same result."""
    app = _resolve_app(app)
    return await asyncio.to_thread(initialize_database, app)


def seed_reference_data() -> dict[str, int]:
    """Apply the fixed seed rows through the session and commit."""
    summary = apply_seed_data(db.session.connection())
    commit_or_raise()
    return summary


def seed_demo_sale() -> Sale | None:
    """
    Insert the demonstration sale when no sale exists yet.

    Returns the new Sale, or None when sales already exist.

    Raises:
        MissingReferenceError: seeded customer or product is missing
    """
    if db.session.query(Sale.id).first() is not None:
        return None

    customer_id = seed_data.DEMO_SALE["customer_id"]
    product_id = seed_data.DEMO_SALE_ITEM["product_id"]

    customer = db.session.get(Customer, customer_id)
    if customer is None:
        raise MissingReferenceError("customers", customer_id)
    if db.session.get(Product, product_id) is None:
        raise MissingReferenceError("products", product_id)

    sale_date = yesterday()
    sale = Sale(sale_date=sale_date, **seed_data.DEMO_SALE)
    sale.items.append(SaleItem(**seed_data.DEMO_SALE_ITEM))
    db.session.add(sale)

    sales_service.record_customer_purchase(customer, sale.total_amount, sale_date)
    commit_or_raise()

    logger.info("Seeded demonstration sale %s", sale.invoice_number)
    return sale

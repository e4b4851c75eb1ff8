"""Seed reference data: categories, admin user, settings, products, customers

Revision ID: 0002_seed_reference_data
Revises: 0001_initial_schema
Create Date: 2025-09-26
"""

from alembic import op
import sqlalchemy as sa

from khadi_store.services.seed_service import SEED_PLAN, apply_seed_data


# revision identifiers, used by Alembic.
revision = "0002_seed_reference_data"
down_revision = "0001_initial_schema"
branch_labels = None
depends_on = None


def upgrade():
    apply_seed_data(op.get_bind())


def downgrade():
    bind = op.get_bind()
    # reverse FK order: products before categories
    for table_name, rows, _ in reversed(SEED_PLAN):
        table = sa.table(table_name, sa.column("id", sa.Integer()))
        bind.execute(table.delete().where(table.c.id.in_([row["id"] for row in rows])))

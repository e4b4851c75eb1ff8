"""Initial schema: catalog, customers, sales, returns, users, settings

Revision ID: 0001_initial_schema
Revises:
Create Date: 2025-09-26
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "0001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


def _money(name, **kwargs):
    return sa.Column(name, sa.Numeric(18, 2), nullable=False, server_default=sa.text("0"), **kwargs)


def upgrade():
    op.create_table(
        "categories",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.String(500), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("(CURRENT_TIMESTAMP)"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sqlite_autoincrement=True,
    )
    op.create_index("ix_categories_name", "categories", ["name"], unique=True)
    op.create_index("ix_categories_is_active", "categories", ["is_active"], unique=False)

    op.create_table(
        "customers",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("phone", sa.String(15), nullable=True),
        sa.Column("email", sa.String(200), nullable=True),
        sa.Column("address", sa.String(500), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("(CURRENT_TIMESTAMP)"), nullable=False),
        sa.Column("total_orders", sa.Integer(), nullable=False, server_default=sa.text("0")),
        _money("total_purchases"),
        sa.Column("last_purchase_date", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sqlite_autoincrement=True,
    )
    op.create_index("ix_customers_name", "customers", ["name"], unique=False)
    op.create_index("ix_customers_phone", "customers", ["phone"], unique=False)
    op.create_index("ix_customers_email", "customers", ["email"], unique=False)

    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("username", sa.String(50), nullable=False),
        sa.Column("full_name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(100), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("role", sa.String(20), nullable=False, server_default="Staff"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("(CURRENT_TIMESTAMP)"), nullable=False),
        sa.Column("last_login_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sqlite_autoincrement=True,
    )
    op.create_index("ix_users_username", "users", ["username"], unique=True)
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_is_active", "users", ["is_active"], unique=False)

    op.create_table(
        "settings",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("key", sa.String(100), nullable=False),
        sa.Column("value", sa.String(500), nullable=True),
        sa.Column("description", sa.String(200), nullable=True),
        sa.Column("category", sa.String(100), nullable=False, server_default="General"),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.text("(CURRENT_TIMESTAMP)"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sqlite_autoincrement=True,
    )
    op.create_index("ix_settings_key", "settings", ["key"], unique=True)
    op.create_index("ix_settings_category", "settings", ["category"], unique=False)

    op.create_table(
        "products",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("description", sa.String(500), nullable=True),
        sa.Column("category_id", sa.Integer(), nullable=False),
        sa.Column("purchase_price", sa.Numeric(18, 2), nullable=False),
        sa.Column("sale_price", sa.Numeric(18, 2), nullable=False),
        sa.Column("gst_rate", sa.Numeric(5, 2), nullable=False, server_default=sa.text("5")),
        sa.Column("stock_quantity", sa.Numeric(10, 3), nullable=False, server_default=sa.text("0")),
        sa.Column("minimum_stock", sa.Numeric(10, 3), nullable=False, server_default=sa.text("5")),
        sa.Column("unit_of_measure", sa.String(20), nullable=True, server_default="Piece"),
        sa.Column("sku", sa.String(50), nullable=True),
        sa.Column("barcode", sa.String(50), nullable=True),
        sa.Column("fabric_type", sa.String(100), nullable=True),
        sa.Column("color", sa.String(50), nullable=True),
        sa.Column("size", sa.String(20), nullable=True),
        sa.Column("pattern", sa.String(50), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("(CURRENT_TIMESTAMP)"), nullable=False),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.text("(CURRENT_TIMESTAMP)"), nullable=False),
        sa.ForeignKeyConstraint(["category_id"], ["categories.id"], name="fk_products_category_id", ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
        sqlite_autoincrement=True,
    )
    op.create_index("ix_products_name", "products", ["name"], unique=False)
    op.create_index("ix_products_sku", "products", ["sku"], unique=False)
    op.create_index("ix_products_is_active", "products", ["is_active"], unique=False)
    op.create_index("ix_products_category_id", "products", ["category_id"], unique=False)

    op.create_table(
        "sales",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("invoice_number", sa.String(50), nullable=False),
        sa.Column("sale_date", sa.DateTime(), server_default=sa.text("(CURRENT_TIMESTAMP)"), nullable=False),
        sa.Column("customer_id", sa.Integer(), nullable=True),
        sa.Column("customer_name", sa.String(100), nullable=True),
        sa.Column("customer_phone", sa.String(15), nullable=True),
        sa.Column("payment_method", sa.String(20), nullable=False, server_default="Cash"),
        sa.Column("payment_reference", sa.String(100), nullable=True),
        _money("subtotal"),
        _money("gst_amount"),
        sa.Column("discount_percentage", sa.Numeric(5, 2), nullable=False, server_default=sa.text("0")),
        _money("discount_amount"),
        _money("total_amount"),
        sa.Column("status", sa.String(20), nullable=False, server_default="Completed"),
        sa.Column("notes", sa.String(300), nullable=True),
        sa.ForeignKeyConstraint(["customer_id"], ["customers.id"], name="fk_sales_customer_id"),
        sa.PrimaryKeyConstraint("id"),
        sqlite_autoincrement=True,
    )
    op.create_index("ix_sales_invoice_number", "sales", ["invoice_number"], unique=True)
    op.create_index("ix_sales_sale_date", "sales", ["sale_date"], unique=False)
    op.create_index("ix_sales_customer_id", "sales", ["customer_id"], unique=False)
    op.create_index("ix_sales_status", "sales", ["status"], unique=False)

    op.create_table(
        "sale_items",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("sale_id", sa.Integer(), nullable=False),
        sa.Column("product_id", sa.Integer(), nullable=False),
        sa.Column("product_name", sa.String(200), nullable=False),
        sa.Column("quantity", sa.Numeric(10, 3), nullable=False),
        sa.Column("unit_price", sa.Numeric(18, 2), nullable=False),
        sa.Column("unit_of_measure", sa.String(20), nullable=True, server_default="Piece"),
        sa.Column("gst_rate", sa.Numeric(5, 2), nullable=False, server_default=sa.text("0")),
        _money("gst_amount"),
        _money("line_total"),
        sa.Column("returned_quantity", sa.Numeric(10, 3), nullable=False, server_default=sa.text("0")),
        sa.Column("item_discount_percentage", sa.Numeric(5, 2), nullable=False, server_default=sa.text("0")),
        _money("item_discount_amount"),
        sa.CheckConstraint(
            "item_discount_percentage >= 0 AND item_discount_percentage <= 100",
            name="ck_sale_items_item_discount_percentage",
        ),
        sa.CheckConstraint("item_discount_amount >= 0", name="ck_sale_items_item_discount_amount"),
        sa.ForeignKeyConstraint(["sale_id"], ["sales.id"], name="fk_sale_items_sale_id", ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["product_id"], ["products.id"], name="fk_sale_items_product_id", ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sqlite_autoincrement=True,
    )
    op.create_index("ix_sale_items_sale_id", "sale_items", ["sale_id"], unique=False)
    op.create_index("ix_sale_items_product_id", "sale_items", ["product_id"], unique=False)

    op.create_table(
        "returns",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("return_number", sa.String(50), nullable=False),
        sa.Column("return_date", sa.DateTime(), server_default=sa.text("(CURRENT_TIMESTAMP)"), nullable=False),
        sa.Column("sale_id", sa.Integer(), nullable=False),
        sa.Column("reason", sa.String(200), nullable=False, server_default=""),
        sa.Column("notes", sa.String(500), nullable=True),
        _money("subtotal"),
        _money("gst_amount"),
        _money("discount_amount"),
        _money("total_amount"),
        sa.Column("status", sa.String(20), nullable=False, server_default="Completed"),
        sa.ForeignKeyConstraint(["sale_id"], ["sales.id"], name="fk_returns_sale_id", ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sqlite_autoincrement=True,
    )
    op.create_index("ix_returns_return_number", "returns", ["return_number"], unique=True)
    op.create_index("ix_returns_return_date", "returns", ["return_date"], unique=False)
    op.create_index("ix_returns_sale_id", "returns", ["sale_id"], unique=False)
    op.create_index("ix_returns_status", "returns", ["status"], unique=False)

    op.create_table(
        "return_items",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("return_id", sa.Integer(), nullable=False),
        sa.Column("sale_item_id", sa.Integer(), nullable=False),
        sa.Column("product_id", sa.Integer(), nullable=False),
        sa.Column("product_name", sa.String(200), nullable=False),
        sa.Column("return_quantity", sa.Numeric(10, 3), nullable=False),
        sa.Column("unit_price", sa.Numeric(18, 2), nullable=False),
        sa.Column("unit_of_measure", sa.String(20), nullable=True, server_default="Piece"),
        _money("discount_amount"),
        sa.Column("gst_rate", sa.Numeric(5, 2), nullable=False, server_default=sa.text("0")),
        _money("gst_amount"),
        _money("line_total"),
        sa.ForeignKeyConstraint(["return_id"], ["returns.id"], name="fk_return_items_return_id", ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["sale_item_id"], ["sale_items.id"], name="fk_return_items_sale_item_id", ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["product_id"], ["products.id"], name="fk_return_items_product_id", ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
        sqlite_autoincrement=True,
    )
    op.create_index("ix_return_items_return_id", "return_items", ["return_id"], unique=False)
    op.create_index("ix_return_items_sale_item_id", "return_items", ["sale_item_id"], unique=False)
    op.create_index("ix_return_items_product_id", "return_items", ["product_id"], unique=False)


def downgrade():
    op.drop_table("return_items")
    op.drop_table("returns")
    op.drop_table("sale_items")
    op.drop_table("sales")
    op.drop_table("products")
    op.drop_table("settings")
    op.drop_table("users")
    op.drop_table("customers")
    op.drop_table("categories")

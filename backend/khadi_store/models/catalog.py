from __future__ import annotations

from ..extensions import db
from ..numeric import CURRENCY, PERCENTAGE, QUANTITY, HUNDRED, ZERO, decimal_str, money, percent, to_decimal
from khadi_store.time_utils import to_utc_z


class Category(db.Model):
    """
    Product grouping shown on the sales screen (Men's Kurtas, Sarees, Fabrics...).

    RESTRICT: a category cannot be deleted while any product still points at it.
    Products must be reassigned first (see catalog_service.reassign_products).
    """
    __tablename__ = "categories"
    __table_args__ = (
        db.Index("ix_categories_name", "name", unique=True),
        db.Index("ix_categories_is_active", "is_active"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    description = db.Column(db.String(500), nullable=True)
    is_active = db.Column(db.Boolean, nullable=False, default=True, server_default=db.true())
    created_at = db.Column(db.DateTime, nullable=False, server_default=db.func.now())

    # passive_deletes="all": never null out product.category_id, let the FK refuse
    products = db.relationship(
        "Product",
        back_populates="category",
        lazy=True,
        passive_deletes="all",
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "is_active": self.is_active,
            "created_at": to_utc_z(self.created_at),
        }


class Product(db.Model):
    """
    Sellable item. Garments are tracked per size/colour variant, fabric per meter.

    Prices are rupees with 2 decimals, GST rate is a percentage, stock is kept
    with 3 decimals so fabric can be sold in fractional meters.
    """
    __tablename__ = "products"
    __table_args__ = (
        db.Index("ix_products_name", "name"),
        db.Index("ix_products_sku", "sku"),
        db.Index("ix_products_is_active", "is_active"),
        db.Index("ix_products_category_id", "category_id"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.String(500), nullable=True)

    category_id = db.Column(
        db.Integer,
        db.ForeignKey("categories.id", name="fk_products_category_id", ondelete="RESTRICT"),
        nullable=False,
    )

    # Pricing (INR)
    purchase_price = db.Column(db.Numeric(*CURRENCY), nullable=False)
    sale_price = db.Column(db.Numeric(*CURRENCY), nullable=False)
    gst_rate = db.Column(db.Numeric(*PERCENTAGE), nullable=False, default=5, server_default=db.text("5"))

    # Stock
    stock_quantity = db.Column(db.Numeric(*QUANTITY), nullable=False, default=0, server_default=db.text("0"))
    minimum_stock = db.Column(db.Numeric(*QUANTITY), nullable=False, default=5, server_default=db.text("5"))
    unit_of_measure = db.Column(db.String(20), nullable=True, default="Piece", server_default="Piece")  # Piece, Meter, Kg

    # Identification
    sku = db.Column(db.String(50), nullable=True)
    barcode = db.Column(db.String(50), nullable=True)  # EAN/UPC when the supplier provides one

    # Garment attributes
    fabric_type = db.Column(db.String(100), nullable=True)
    color = db.Column(db.String(50), nullable=True)
    size = db.Column(db.String(20), nullable=True)
    pattern = db.Column(db.String(50), nullable=True)

    is_active = db.Column(db.Boolean, nullable=False, default=True, server_default=db.true())
    created_at = db.Column(db.DateTime, nullable=False, server_default=db.func.now())
    updated_at = db.Column(db.DateTime, nullable=False, server_default=db.func.now(), onupdate=db.func.now())

    category = db.relationship("Category", back_populates="products")

    @property
    def display_name(self) -> str:
        label = self.name
        if self.color:
            label += f" - {self.color}"
        if self.size:
            label += f" ({self.size})"
        return label

    @property
    def price_with_gst(self):
        price = to_decimal(self.sale_price)
        return money(price + price * to_decimal(self.gst_rate) / HUNDRED)

    @property
    def is_low_stock(self) -> bool:
        return to_decimal(self.stock_quantity) <= to_decimal(self.minimum_stock)

    @property
    def stock_status(self) -> str:
        if to_decimal(self.stock_quantity) == ZERO:
            return "Out of Stock"
        if self.is_low_stock:
            return "Low Stock"
        return "In Stock"

    @property
    def profit_margin(self):
        """Margin as a percentage of the sale price."""
        sale = to_decimal(self.sale_price)
        if sale <= ZERO:
            return percent(ZERO)
        return percent((sale - to_decimal(self.purchase_price)) / sale * HUNDRED)

    @property
    def primary_code(self) -> str:
        """Value printed on the barcode label: SKU first, supplier barcode otherwise."""
        return self.sku or self.barcode or ""

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "display_name": self.display_name,
            "description": self.description,
            "category_id": self.category_id,
            "purchase_price": decimal_str(self.purchase_price),
            "sale_price": decimal_str(self.sale_price),
            "gst_rate": decimal_str(self.gst_rate),
            "stock_quantity": decimal_str(self.stock_quantity),
            "minimum_stock": decimal_str(self.minimum_stock),
            "unit_of_measure": self.unit_of_measure,
            "stock_status": self.stock_status,
            "sku": self.sku,
            "barcode": self.barcode,
            "fabric_type": self.fabric_type,
            "color": self.color,
            "size": self.size,
            "pattern": self.pattern,
            "is_active": self.is_active,
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }

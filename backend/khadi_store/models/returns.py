from __future__ import annotations

from ..extensions import db
from ..numeric import CURRENCY, PERCENTAGE, QUANTITY, decimal_str
from khadi_store.time_utils import to_utc_z, utcnow


class Return(db.Model):
    """
    Customer return against an earlier sale.

    CASCADE: deleting a return deletes its items, never the sale lines or
    products those items point at.
    """
    __tablename__ = "returns"
    __table_args__ = (
        db.Index("ix_returns_return_number", "return_number", unique=True),
        db.Index("ix_returns_return_date", "return_date"),
        db.Index("ix_returns_sale_id", "sale_id"),
        db.Index("ix_returns_status", "status"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    return_number = db.Column(db.String(50), nullable=False)
    return_date = db.Column(db.DateTime, nullable=False, default=utcnow, server_default=db.func.now())

    sale_id = db.Column(
        db.Integer,
        db.ForeignKey("sales.id", name="fk_returns_sale_id", ondelete="CASCADE"),
        nullable=False,
    )

    reason = db.Column(db.String(200), nullable=False, default="", server_default="")
    notes = db.Column(db.String(500), nullable=True)

    subtotal = db.Column(db.Numeric(*CURRENCY), nullable=False, default=0, server_default=db.text("0"))
    gst_amount = db.Column(db.Numeric(*CURRENCY), nullable=False, default=0, server_default=db.text("0"))
    discount_amount = db.Column(db.Numeric(*CURRENCY), nullable=False, default=0, server_default=db.text("0"))
    total_amount = db.Column(db.Numeric(*CURRENCY), nullable=False, default=0, server_default=db.text("0"))

    status = db.Column(db.String(20), nullable=False, default="Completed", server_default="Completed")

    sale = db.relationship("Sale", back_populates="returns")
    items = db.relationship(
        "ReturnItem",
        back_populates="return_",
        cascade="all, delete-orphan",
        order_by="ReturnItem.id",
    )

    @property
    def customer_name(self) -> str:
        return self.sale.customer_display_name if self.sale is not None else "Unknown"

    def to_dict(self, include_items: bool = False) -> dict:
        data = {
            "id": self.id,
            "return_number": self.return_number,
            "return_date": to_utc_z(self.return_date),
            "sale_id": self.sale_id,
            "reason": self.reason,
            "notes": self.notes,
            "subtotal": decimal_str(self.subtotal),
            "gst_amount": decimal_str(self.gst_amount),
            "discount_amount": decimal_str(self.discount_amount),
            "total_amount": decimal_str(self.total_amount),
            "status": self.status,
        }
        if include_items:
            data["items"] = [item.to_dict() for item in self.items]
        return data


class ReturnItem(db.Model):
    """
    Line of a return.

    RESTRICT on sale_item_id and product_id: the lineage back to the original
    sale line and product must never be orphaned.
    """
    __tablename__ = "return_items"
    __table_args__ = (
        db.Index("ix_return_items_return_id", "return_id"),
        db.Index("ix_return_items_sale_item_id", "sale_item_id"),
        db.Index("ix_return_items_product_id", "product_id"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    return_id = db.Column(
        db.Integer,
        db.ForeignKey("returns.id", name="fk_return_items_return_id", ondelete="CASCADE"),
        nullable=False,
    )
    sale_item_id = db.Column(
        db.Integer,
        db.ForeignKey("sale_items.id", name="fk_return_items_sale_item_id", ondelete="RESTRICT"),
        nullable=False,
    )
    product_id = db.Column(
        db.Integer,
        db.ForeignKey("products.id", name="fk_return_items_product_id", ondelete="RESTRICT"),
        nullable=False,
    )

    product_name = db.Column(db.String(200), nullable=False)
    return_quantity = db.Column(db.Numeric(*QUANTITY), nullable=False)
    unit_price = db.Column(db.Numeric(*CURRENCY), nullable=False)
    unit_of_measure = db.Column(db.String(20), nullable=True, default="Piece", server_default="Piece")

    discount_amount = db.Column(db.Numeric(*CURRENCY), nullable=False, default=0, server_default=db.text("0"))
    gst_rate = db.Column(db.Numeric(*PERCENTAGE), nullable=False, default=0, server_default=db.text("0"))
    gst_amount = db.Column(db.Numeric(*CURRENCY), nullable=False, default=0, server_default=db.text("0"))
    line_total = db.Column(db.Numeric(*CURRENCY), nullable=False, default=0, server_default=db.text("0"))

    # "return" is a keyword, hence the trailing underscore
    return_ = db.relationship("Return", back_populates="items")
    sale_item = db.relationship("SaleItem", back_populates="return_items")
    product = db.relationship("Product", backref=db.backref("return_items", lazy=True, passive_deletes="all"))

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "return_id": self.return_id,
            "sale_item_id": self.sale_item_id,
            "product_id": self.product_id,
            "product_name": self.product_name,
            "return_quantity": decimal_str(self.return_quantity),
            "unit_price": decimal_str(self.unit_price),
            "unit_of_measure": self.unit_of_measure,
            "discount_amount": decimal_str(self.discount_amount),
            "gst_rate": decimal_str(self.gst_rate),
            "gst_amount": decimal_str(self.gst_amount),
            "line_total": decimal_str(self.line_total),
        }

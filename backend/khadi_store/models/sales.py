from __future__ import annotations

from ..extensions import db
from ..numeric import CURRENCY, PERCENTAGE, QUANTITY, HUNDRED, ZERO, decimal_str, money, percent, quantity, to_decimal
from khadi_store.time_utils import to_utc_z, utcnow


class Sale(db.Model):
    """
    Invoice header.

    CASCADE: deleting a sale deletes its items and its returns.
    invoice_number is unique at the storage layer; sequence generation is the
    caller's job.
    """
    __tablename__ = "sales"
    __table_args__ = (
        db.Index("ix_sales_invoice_number", "invoice_number", unique=True),
        db.Index("ix_sales_sale_date", "sale_date"),
        db.Index("ix_sales_customer_id", "customer_id"),
        db.Index("ix_sales_status", "status"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)

    # Human-readable invoice number (e.g., "KHD000001")
    invoice_number = db.Column(db.String(50), nullable=False)
    sale_date = db.Column(db.DateTime, nullable=False, default=utcnow, server_default=db.func.now())

    customer_id = db.Column(db.Integer, db.ForeignKey("customers.id", name="fk_sales_customer_id"), nullable=True)
    # Walk-in snapshot when no customer record is linked
    customer_name = db.Column(db.String(100), nullable=True)
    customer_phone = db.Column(db.String(15), nullable=True)

    payment_method = db.Column(db.String(20), nullable=False, default="Cash", server_default="Cash")  # Cash, Card, UPI
    payment_reference = db.Column(db.String(100), nullable=True)

    # Totals (INR)
    subtotal = db.Column(db.Numeric(*CURRENCY), nullable=False, default=0, server_default=db.text("0"))
    gst_amount = db.Column(db.Numeric(*CURRENCY), nullable=False, default=0, server_default=db.text("0"))
    discount_percentage = db.Column(db.Numeric(*PERCENTAGE), nullable=False, default=0, server_default=db.text("0"))
    discount_amount = db.Column(db.Numeric(*CURRENCY), nullable=False, default=0, server_default=db.text("0"))
    total_amount = db.Column(db.Numeric(*CURRENCY), nullable=False, default=0, server_default=db.text("0"))

    status = db.Column(db.String(20), nullable=False, default="Completed", server_default="Completed")
    notes = db.Column(db.String(300), nullable=True)

    customer = db.relationship("Customer", backref=db.backref("sales", lazy=True, passive_deletes="all"))
    items = db.relationship(
        "SaleItem",
        back_populates="sale",
        cascade="all, delete-orphan",
        order_by="SaleItem.id",
    )
    returns = db.relationship(
        "Return",
        back_populates="sale",
        cascade="all, delete-orphan",
        order_by="Return.id",
    )

    @property
    def customer_display_name(self) -> str:
        if self.customer_name:
            return self.customer_name
        if self.customer is not None:
            return self.customer.name
        return "Walk-in Customer"

    @property
    def item_count(self):
        return quantity(sum((to_decimal(i.quantity) for i in self.items), ZERO))

    @property
    def total_item_discounts(self):
        return money(sum((to_decimal(i.item_discount_amount) for i in self.items), ZERO))

    @property
    def returned_amount(self):
        return money(sum((to_decimal(r.total_amount) for r in self.returns if r.status == "Completed"), ZERO))

    @property
    def net_amount(self):
        return money(to_decimal(self.total_amount) - self.returned_amount)

    def apply_discount_to_items(self, discount_percentage) -> None:
        """Spread an overall discount percentage over every line, then re-total."""
        for item in self.items:
            item.apply_discount_percentage(discount_percentage)
        self.discount_percentage = percent(discount_percentage)
        self.recalculate_totals()

    def recalculate_totals(self) -> None:
        self.subtotal = money(sum((i.line_subtotal for i in self.items), ZERO))
        self.discount_amount = money(sum((to_decimal(i.item_discount_amount) for i in self.items), ZERO))
        self.gst_amount = money(sum((i.line_gst_amount for i in self.items), ZERO))
        self.total_amount = money(sum((i.line_total_with_discount for i in self.items), ZERO))

    def to_dict(self, include_items: bool = False) -> dict:
        data = {
            "id": self.id,
            "invoice_number": self.invoice_number,
            "sale_date": to_utc_z(self.sale_date),
            "customer_id": self.customer_id,
            "customer_name": self.customer_display_name,
            "customer_phone": self.customer_phone,
            "payment_method": self.payment_method,
            "payment_reference": self.payment_reference,
            "subtotal": decimal_str(self.subtotal),
            "gst_amount": decimal_str(self.gst_amount),
            "discount_percentage": decimal_str(self.discount_percentage),
            "discount_amount": decimal_str(self.discount_amount),
            "total_amount": decimal_str(self.total_amount),
            "status": self.status,
            "notes": self.notes,
        }
        if include_items:
            data["items"] = [item.to_dict() for item in self.items]
        return data


class SaleItem(db.Model):
    """
    Invoice line with item-level discount.

    CHECK: item_discount_percentage in [0, 100], item_discount_amount >= 0.
    RESTRICT: a line cannot be deleted while a return item references it.
    """
    __tablename__ = "sale_items"
    __table_args__ = (
        db.CheckConstraint(
            "item_discount_percentage >= 0 AND item_discount_percentage <= 100",
            name="ck_sale_items_item_discount_percentage",
        ),
        db.CheckConstraint(
            "item_discount_amount >= 0",
            name="ck_sale_items_item_discount_amount",
        ),
        db.Index("ix_sale_items_sale_id", "sale_id"),
        db.Index("ix_sale_items_product_id", "product_id"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    sale_id = db.Column(
        db.Integer,
        db.ForeignKey("sales.id", name="fk_sale_items_sale_id", ondelete="CASCADE"),
        nullable=False,
    )
    product_id = db.Column(
        db.Integer,
        db.ForeignKey("products.id", name="fk_sale_items_product_id", ondelete="CASCADE"),
        nullable=False,
    )

    # Snapshot at time of sale
    product_name = db.Column(db.String(200), nullable=False)
    quantity = db.Column(db.Numeric(*QUANTITY), nullable=False)
    unit_price = db.Column(db.Numeric(*CURRENCY), nullable=False)
    unit_of_measure = db.Column(db.String(20), nullable=True, default="Piece", server_default="Piece")

    gst_rate = db.Column(db.Numeric(*PERCENTAGE), nullable=False, default=0, server_default=db.text("0"))
    gst_amount = db.Column(db.Numeric(*CURRENCY), nullable=False, default=0, server_default=db.text("0"))
    line_total = db.Column(db.Numeric(*CURRENCY), nullable=False, default=0, server_default=db.text("0"))

    returned_quantity = db.Column(db.Numeric(*QUANTITY), nullable=False, default=0, server_default=db.text("0"))

    item_discount_percentage = db.Column(db.Numeric(*PERCENTAGE), nullable=False, default=0, server_default=db.text("0"))
    item_discount_amount = db.Column(db.Numeric(*CURRENCY), nullable=False, default=0, server_default=db.text("0"))

    sale = db.relationship("Sale", back_populates="items")
    product = db.relationship("Product")
    return_items = db.relationship("ReturnItem", back_populates="sale_item", passive_deletes="all")

    @property
    def line_subtotal(self):
        return money(to_decimal(self.unit_price) * to_decimal(self.quantity))

    @property
    def line_subtotal_after_discount(self):
        return money(self.line_subtotal - to_decimal(self.item_discount_amount))

    @property
    def line_gst_amount(self):
        return money(self.line_subtotal_after_discount * to_decimal(self.gst_rate) / HUNDRED)

    @property
    def line_total_with_discount(self):
        return money(self.line_subtotal_after_discount + self.line_gst_amount)

    @property
    def has_item_discount(self) -> bool:
        return to_decimal(self.item_discount_percentage) > ZERO or to_decimal(self.item_discount_amount) > ZERO

    @property
    def returnable_quantity(self):
        return quantity(to_decimal(self.quantity) - to_decimal(self.returned_quantity))

    @property
    def can_be_returned(self) -> bool:
        return self.returnable_quantity > ZERO

    def apply_discount_percentage(self, discount_percentage) -> None:
        pct = percent(discount_percentage)
        self.item_discount_percentage = pct
        self.item_discount_amount = money(self.line_subtotal * pct / HUNDRED)
        self._refresh_line()

    def apply_discount_amount(self, discount_amount) -> None:
        amount = money(discount_amount)
        subtotal = self.line_subtotal
        self.item_discount_amount = amount
        self.item_discount_percentage = percent(amount / subtotal * HUNDRED) if subtotal > ZERO else percent(ZERO)
        self._refresh_line()

    def clear_discount(self) -> None:
        self.item_discount_percentage = percent(ZERO)
        self.item_discount_amount = money(ZERO)
        self._refresh_line()

    def _refresh_line(self) -> None:
        self.gst_amount = self.line_gst_amount
        self.line_total = self.line_total_with_discount

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "sale_id": self.sale_id,
            "product_id": self.product_id,
            "product_name": self.product_name,
            "quantity": decimal_str(self.quantity),
            "unit_price": decimal_str(self.unit_price),
            "unit_of_measure": self.unit_of_measure,
            "gst_rate": decimal_str(self.gst_rate),
            "gst_amount": decimal_str(self.gst_amount),
            "line_total": decimal_str(self.line_total),
            "returned_quantity": decimal_str(self.returned_quantity),
            "item_discount_percentage": decimal_str(self.item_discount_percentage),
            "item_discount_amount": decimal_str(self.item_discount_amount),
        }

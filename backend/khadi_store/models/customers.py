from __future__ import annotations

from ..extensions import db
from ..numeric import CURRENCY, ZERO, decimal_str, money, to_decimal
from khadi_store.time_utils import to_utc_z


class Customer(db.Model):
    """
    Customer master data for repeat-purchase tracking.

    Denormalized aggregates (total_orders, total_purchases, last_purchase_date)
    are maintained by sale processing; see sales_service.record_customer_purchase.
    """
    __tablename__ = "customers"
    __table_args__ = (
        db.Index("ix_customers_name", "name"),
        db.Index("ix_customers_phone", "phone"),
        db.Index("ix_customers_email", "email"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    phone = db.Column(db.String(15), nullable=True)
    email = db.Column(db.String(200), nullable=True)
    address = db.Column(db.String(500), nullable=True)

    created_at = db.Column(db.DateTime, nullable=False, server_default=db.func.now())

    # Denormalized aggregates
    total_orders = db.Column(db.Integer, nullable=False, default=0, server_default=db.text("0"))
    total_purchases = db.Column(db.Numeric(*CURRENCY), nullable=False, default=0, server_default=db.text("0"))
    last_purchase_date = db.Column(db.DateTime, nullable=True)

    @property
    def customer_type(self) -> str:
        orders = self.total_orders or 0
        if orders == 0:
            return "New"
        if orders == 1:
            return "Second-time"
        if orders < 5:
            return "Regular"
        return "Loyal"

    @property
    def average_order_value(self):
        if not self.total_orders:
            return money(ZERO)
        return money(to_decimal(self.total_purchases) / self.total_orders)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "phone": self.phone,
            "email": self.email,
            "address": self.address,
            "total_orders": self.total_orders,
            "total_purchases": decimal_str(self.total_purchases),
            "last_purchase_date": to_utc_z(self.last_purchase_date) if self.last_purchase_date else None,
            "customer_type": self.customer_type,
            "created_at": to_utc_z(self.created_at),
        }

# backend/khadi_store/services/sales_service.py
"""
Sale maintenance: customer aggregates and the sale delete policy.

Checkout itself (pricing the cart, picking the invoice number, decrementing
stock) belongs to the application layer. What lives here is the part that has
to agree with the schema:

- CASCADE Sale -> SaleItem and Sale -> Return -> ReturnItem
- RESTRICT SaleItem -> ReturnItem
"""
from __future__ import annotations

import logging
from datetime import datetime

from ..extensions import db
from ..errors import RestrictedDeleteError, commit_or_raise
from ..models import Customer, Return, ReturnItem, Sale, SaleItem
from ..numeric import money, to_decimal

logger = logging.getLogger(__name__)


def get_sale_by_invoice(invoice_number: str) -> Sale | None:
    return db.session.query(Sale).filter(Sale.invoice_number == invoice_number).first()


def record_customer_purchase(customer: Customer, amount, purchased_at: datetime) -> Customer:
    """
    Fold one completed sale into the customer's aggregates. Does not commit.

    last_purchase_date keeps the latest date seen: recording an older sale
    (a back-dated entry) bumps the counters but leaves a newer date in place.
    """
    customer.total_orders = (customer.total_orders or 0) + 1
    customer.total_purchases = money(to_decimal(customer.total_purchases) + to_decimal(amount))
    if customer.last_purchase_date is None or purchased_at > customer.last_purchase_date:
        customer.last_purchase_date = purchased_at
    return customer


def foreign_return_references(sale: Sale) -> int:
    """Return lines against this sale's items that belong to *another* sale's returns."""
    item_ids = [item.id for item in sale.items]
    if not item_ids:
        return 0
    return (
        db.session.query(ReturnItem)
        .join(Return, ReturnItem.return_id == Return.id)
        .filter(ReturnItem.sale_item_id.in_(item_ids), Return.sale_id != sale.id)
        .count()
    )


def delete_sale(sale_id: int) -> None:
    """
    Delete a sale with its items and its returns.

    Raises:
        LookupError: sale does not exist
        RestrictedDeleteError: one of its items is referenced from another sale's return
    """
    sale = db.session.get(Sale, sale_id)
    if sale is None:
        raise LookupError(f"Sale {sale_id} not found")

    count = foreign_return_references(sale)
    if count:
        raise RestrictedDeleteError("sales", sale_id, {"return_items": count})

    invoice_number = sale.invoice_number
    db.session.delete(sale)
    commit_or_raise()
    logger.info("Deleted sale %s (%s)", sale_id, invoice_number)


def delete_sale_item(sale_item_id: int) -> None:
    """
    Delete a single sale line.

    Raises RestrictedDeleteError while any return line references it.
    """
    item = db.session.get(SaleItem, sale_item_id)
    if item is None:
        raise LookupError(f"Sale item {sale_item_id} not found")

    count = db.session.query(ReturnItem).filter(ReturnItem.sale_item_id == sale_item_id).count()
    if count:
        raise RestrictedDeleteError("sale_items", sale_item_id, {"return_items": count})

    db.session.delete(item)
    commit_or_raise()

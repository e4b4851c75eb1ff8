# backend/khadi_store/services/catalog_service.py
"""
Category and product maintenance with the delete policy made explicit.

The storage layer already refuses restricted deletes; the pre-delete checks here
report *what* is blocking (how many products, how many return lines) before any
SQL is issued, so the caller can tell staff to reassign or keep the row.

RESTRICT rules:
- Category -> Product
- Product -> ReturnItem (directly, and through the product's sale lines)
"""
from __future__ import annotations

import logging

from ..extensions import db
from ..errors import RestrictedDeleteError, commit_or_raise
from ..models import Category, Product, ReturnItem, SaleItem
from ..numeric import to_decimal

logger = logging.getLogger(__name__)


def get_category_or_404(category_id: int) -> Category:
    category = db.session.get(Category, category_id)
    if category is None:
        raise LookupError(f"Category {category_id} not found")
    return category


def get_product_or_404(product_id: int) -> Product:
    product = db.session.get(Product, product_id)
    if product is None:
        raise LookupError(f"Product {product_id} not found")
    return product


def create_category(name: str, description: str | None = None, is_active: bool = True) -> Category:
    """Raises UniqueViolation when the name is already used."""
    category = Category(name=name.strip(), description=description, is_active=is_active)
    db.session.add(category)
    commit_or_raise()
    return category


def product_count(category_id: int) -> int:
    return db.session.query(Product).filter(Product.category_id == category_id).count()


def delete_category(category_id: int) -> None:
    """
    Delete a category that no product references.

    Raises:
        LookupError: category does not exist
        RestrictedDeleteError: products still reference it
    """
    category = get_category_or_404(category_id)
    count = product_count(category_id)
    if count:
        raise RestrictedDeleteError("categories", category_id, {"products": count})

    name = category.name
    db.session.delete(category)
    commit_or_raise()
    logger.info("Deleted category %s (%s)", category_id, name)


def reassign_products(from_category_id: int, to_category_id: int) -> int:
    """
    Move every product from one category to another. Returns the number moved.
    """
    if from_category_id == to_category_id:
        return 0
    get_category_or_404(from_category_id)
    get_category_or_404(to_category_id)

    moved = (
        db.session.query(Product)
        .filter(Product.category_id == from_category_id)
        .update({Product.category_id: to_category_id}, synchronize_session="fetch")
    )
    commit_or_raise()
    logger.info("Reassigned %d product(s) from category %s to %s", moved, from_category_id, to_category_id)
    return moved


def product_return_references(product_id: int) -> int:
    """Return lines pointing at the product, directly or via one of its sale lines."""
    sale_item_ids = db.session.query(SaleItem.id).filter(SaleItem.product_id == product_id)
    return (
        db.session.query(ReturnItem)
        .filter(
            db.or_(
                ReturnItem.product_id == product_id,
                ReturnItem.sale_item_id.in_(sale_item_ids),
            )
        )
        .count()
    )


def deactivate_product(product_id: int) -> Product:
    """
    Retire a product from sale without touching its history.

    Normal way to "delete" a product that has been sold: invoices keep their
    lines, the product just drops out of active listings and low-stock reports.
    """
    product = get_product_or_404(product_id)
    if product.is_active:
        product.is_active = False
        commit_or_raise()
        logger.info("Deactivated product %s (%s)", product_id, product.name)
    return product


def delete_product(product_id: int) -> None:
    """
    Permanently delete a product.

    Its sale lines go with it (storage-level cascade), which rewrites completed
    invoices; use deactivate_product() for anything that has been sold. Refused
    while any return line references the product or one of those sale lines.
    """
    product = get_product_or_404(product_id)
    count = product_return_references(product_id)
    if count:
        raise RestrictedDeleteError("products", product_id, {"return_items": count})

    name = product.name
    db.session.delete(product)
    commit_or_raise()
    # sale_items rows were removed by ON DELETE CASCADE behind the ORM's back
    db.session.expire_all()
    logger.info("Deleted product %s (%s)", product_id, name)


def low_stock_products(threshold=None) -> list[Product]:
    """
    Active products at or under their minimum stock.

    threshold overrides each product's own minimum_stock when given.
    """
    query = db.session.query(Product).filter(Product.is_active.is_(True))
    if threshold is not None:
        query = query.filter(Product.stock_quantity <= to_decimal(threshold))
    else:
        query = query.filter(Product.stock_quantity <= Product.minimum_stock)
    return query.order_by(Product.stock_quantity.asc(), Product.id.asc()).all()

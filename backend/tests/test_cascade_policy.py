"""
Delete policy across the schema.

RESTRICT: Category -> Product, SaleItem -> ReturnItem, Product -> ReturnItem
CASCADE:  Sale -> SaleItem, Sale -> Return -> ReturnItem, Product -> SaleItem
"""

import pytest

from khadi_store.extensions import db
from khadi_store.errors import ForeignKeyViolation, RestrictedDeleteError, commit_or_raise
from khadi_store.models import Category, Product, Return, ReturnItem, Sale, SaleItem
from khadi_store.services import catalog_service, returns_service, sales_service


class TestCategoryRestrict:
    def test_delete_category_with_products_refused(self, seeded):
        with pytest.raises(RestrictedDeleteError) as exc_info:
            catalog_service.delete_category(1)

        err = exc_info.value
        assert err.dependents == {"products": 3}
        assert err.table == "categories"
        assert "still referenced by 3 products" in str(err)
        assert db.session.get(Category, 1) is not None

    def test_raw_orm_delete_refused_by_storage(self, seeded):
        # bypass the pre-delete check, the foreign key must still refuse
        db.session.delete(db.session.get(Category, 1))
        with pytest.raises(ForeignKeyViolation):
            commit_or_raise()

        db.session.expire_all()
        assert db.session.get(Category, 1) is not None
        assert all(p.category_id == 1 for p in db.session.query(Product).filter(Product.id.in_([1, 2, 3])))

    def test_reassign_then_delete(self, seeded):
        moved = catalog_service.reassign_products(1, 5)
        assert moved == 3

        catalog_service.delete_category(1)

        assert db.session.get(Category, 1) is None
        assert catalog_service.product_count(5) == 3

    def test_empty_category_deletes(self, seeded):
        category = catalog_service.create_category("Gift Sets")
        catalog_service.delete_category(category.id)
        assert db.session.query(Category).filter_by(name="Gift Sets").count() == 0

    def test_missing_category(self, seeded):
        with pytest.raises(LookupError):
            catalog_service.delete_category(999)

    def test_reassign_to_same_category_is_noop(self, seeded):
        assert catalog_service.reassign_products(2, 2) == 0


class TestSaleCascade:
    def test_delete_sale_removes_items_and_returns(self, make_sale, make_return):
        sale = make_sale(lines=((1, "1"), (2, "2")))
        make_return(sale)
        sale_id = sale.id

        sales_service.delete_sale(sale_id)

        assert db.session.get(Sale, sale_id) is None
        assert db.session.query(SaleItem).count() == 0
        assert db.session.query(Return).count() == 0
        assert db.session.query(ReturnItem).count() == 0

    def test_delete_sale_blocked_by_foreign_return(self, make_sale, make_return):
        first = make_sale()
        other = make_sale()
        # a return filed under another sale that points at first's line
        make_return(other, items=list(first.items))

        with pytest.raises(RestrictedDeleteError) as exc_info:
            sales_service.delete_sale(first.id)

        assert exc_info.value.dependents == {"return_items": 1}
        assert db.session.get(Sale, first.id) is not None

    def test_delete_sale_leaves_other_sales(self, make_sale):
        keep = make_sale()
        drop = make_sale()

        sales_service.delete_sale(drop.id)

        assert db.session.query(Sale).one().id == keep.id
        assert db.session.query(SaleItem).one().sale_id == keep.id

    def test_delete_missing_sale(self, seeded):
        with pytest.raises(LookupError):
            sales_service.delete_sale(12345)


class TestReturnCascade:
    def test_delete_return_keeps_sale_items(self, make_sale, make_return):
        sale = make_sale(lines=((1, "1"), (4, "1")))
        ret = make_return(sale)

        returns_service.delete_return(ret.id)

        assert db.session.query(Return).count() == 0
        assert db.session.query(ReturnItem).count() == 0
        assert db.session.query(SaleItem).count() == 2
        assert db.session.get(Product, 1) is not None

    def test_lookup_by_number(self, make_sale, make_return):
        sale = make_sale()
        make_return(sale, return_number="RET000042")

        found = returns_service.get_return_by_number("RET000042")
        assert found is not None and found.sale_id == sale.id
        assert returns_service.get_return_by_number("RET999999") is None


class TestSaleItemRestrict:
    def test_referenced_line_cannot_be_deleted(self, make_sale, make_return):
        sale = make_sale()
        make_return(sale)
        item_id = sale.items[0].id

        with pytest.raises(RestrictedDeleteError) as exc_info:
            sales_service.delete_sale_item(item_id)

        assert exc_info.value.table == "sale_items"
        assert db.session.get(SaleItem, item_id) is not None

    def test_raw_delete_of_referenced_line_refused_by_storage(self, make_sale, make_return):
        sale = make_sale()
        make_return(sale)

        db.session.delete(sale.items[0])
        with pytest.raises(ForeignKeyViolation):
            commit_or_raise()

    def test_unreferenced_line_deletes(self, make_sale):
        sale = make_sale(lines=((1, "1"), (2, "1")))
        item_id = sale.items[1].id

        sales_service.delete_sale_item(item_id)

        db.session.expire_all()
        assert [i.product_id for i in db.session.get(Sale, sale.id).items] == [1]


class TestProductDelete:
    def test_product_with_returns_refused(self, make_sale, make_return):
        sale = make_sale()
        make_return(sale)

        with pytest.raises(RestrictedDeleteError) as exc_info:
            catalog_service.delete_product(1)

        assert exc_info.value.dependents == {"return_items": 1}
        assert db.session.get(Product, 1) is not None

    def test_product_delete_cascades_sale_lines(self, make_sale):
        sale = make_sale(lines=((1, "1"), (2, "1")))
        sale_id = sale.id

        catalog_service.delete_product(1)

        assert db.session.get(Product, 1) is None
        remaining = db.session.query(SaleItem).filter_by(sale_id=sale_id).all()
        assert [i.product_id for i in remaining] == [2]

    def test_missing_product(self, seeded):
        with pytest.raises(LookupError):
            catalog_service.delete_product(404)

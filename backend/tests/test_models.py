"""Derived values on the mapped models (no database round trip)."""

from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from khadi_store.models import Customer, Product, Return, Sale, SaleItem, User
from khadi_store.numeric import money, quantity, to_decimal
from khadi_store.time_utils import to_utc_z


def _item(qty="2", price="500.00", gst="5.00"):
    item = SaleItem(
        product_id=1,
        product_name="Cotton Khadi Kurta",
        quantity=Decimal(qty),
        unit_price=Decimal(price),
        gst_rate=Decimal(gst),
        returned_quantity=Decimal("0"),
    )
    item.clear_discount()
    return item


class TestSaleItem:
    def test_line_without_discount(self):
        item = _item()
        assert item.line_subtotal == Decimal("1000.00")
        assert item.gst_amount == Decimal("50.00")
        assert item.line_total == Decimal("1050.00")
        assert not item.has_item_discount

    def test_percentage_discount(self):
        item = _item()
        item.apply_discount_percentage("10")

        assert item.item_discount_amount == Decimal("100.00")
        assert item.line_subtotal_after_discount == Decimal("900.00")
        assert item.gst_amount == Decimal("45.00")
        assert item.line_total == Decimal("945.00")
        assert item.has_item_discount

    def test_amount_discount_derives_percentage(self):
        item = _item()
        item.apply_discount_amount("250")

        assert item.item_discount_percentage == Decimal("25.00")
        assert item.line_total == Decimal("787.50")

    def test_amount_discount_on_zero_price_line(self):
        item = _item(price="0")
        item.apply_discount_amount("0")
        assert item.item_discount_percentage == Decimal("0.00")

    def test_clear_discount(self):
        item = _item()
        item.apply_discount_percentage("20")
        item.clear_discount()
        assert item.line_total == Decimal("1050.00")
        assert not item.has_item_discount

    def test_returnable_quantity(self):
        item = _item(qty="3")
        item.returned_quantity = Decimal("1")
        assert item.returnable_quantity == Decimal("2.000")
        assert item.can_be_returned

        item.returned_quantity = Decimal("3")
        assert not item.can_be_returned

    def test_fractional_fabric_quantity(self):
        item = _item(qty="2.5", price="120.00")
        assert item.line_subtotal == Decimal("300.00")
        assert item.line_total == Decimal("315.00")


class TestSale:
    def test_totals_from_lines(self):
        sale = Sale(invoice_number="KHD000002")
        sale.items.extend([_item(), _item(qty="1", price="480.00", gst="12.00")])
        sale.recalculate_totals()

        assert sale.subtotal == Decimal("1480.00")
        assert sale.gst_amount == Decimal("107.60")
        assert sale.total_amount == Decimal("1587.60")
        assert sale.item_count == Decimal("3.000")

    def test_overall_discount_spread_over_lines(self):
        sale = Sale(invoice_number="KHD000003")
        sale.items.extend([_item(), _item(qty="1", price="200.00")])
        sale.apply_discount_to_items("10")

        assert sale.discount_percentage == Decimal("10.00")
        assert sale.discount_amount == Decimal("120.00")
        assert sale.total_item_discounts == Decimal("120.00")
        assert sale.total_amount == Decimal("1134.00")

    def test_customer_display_name(self):
        sale = Sale(invoice_number="KHD000004")
        assert sale.customer_display_name == "Walk-in Customer"

        sale.customer = Customer(name="Priya Sharma")
        assert sale.customer_display_name == "Priya Sharma"

        sale.customer_name = "Counter Name"
        assert sale.customer_display_name == "Counter Name"

    def test_net_amount_counts_completed_returns_only(self):
        sale = Sale(invoice_number="KHD000005", total_amount=Decimal("1000.00"))
        sale.returns.append(Return(return_number="RET000001", total_amount=Decimal("300.00"), status="Completed"))
        sale.returns.append(Return(return_number="RET000002", total_amount=Decimal("200.00"), status="Cancelled"))

        assert sale.returned_amount == Decimal("300.00")
        assert sale.net_amount == Decimal("700.00")

    def test_return_shows_sale_customer(self):
        sale = Sale(invoice_number="KHD000006", customer_name="Rajesh Kumar")
        ret = Return(return_number="RET000003", sale=sale)
        assert ret.customer_name == "Rajesh Kumar"
        assert Return(return_number="RET000004").customer_name == "Unknown"

    def test_to_dict_serializes_decimals_as_strings(self):
        sale = Sale(
            invoice_number="KHD000007",
            sale_date=datetime(2024, 3, 1, 10, 30),
            total_amount=Decimal("682.50"),
        )
        sale.items.append(_item())
        data = sale.to_dict(include_items=True)

        assert data["total_amount"] == "682.50"
        assert data["sale_date"] == "2024-03-01T10:30:00Z"
        assert len(data["items"]) == 1


class TestProduct:
    def _product(self, **overrides):
        values = dict(
            name="Cotton Khadi Kurta",
            category_id=1,
            purchase_price=Decimal("400.00"),
            sale_price=Decimal("650.00"),
            gst_rate=Decimal("5.00"),
            stock_quantity=Decimal("25"),
            minimum_stock=Decimal("5"),
        )
        values.update(overrides)
        return Product(**values)

    def test_display_name(self):
        assert self._product().display_name == "Cotton Khadi Kurta"
        assert self._product(color="White", size="M").display_name == "Cotton Khadi Kurta - White (M)"

    def test_price_with_gst_and_margin(self):
        product = self._product()
        assert product.price_with_gst == Decimal("682.50")
        assert product.profit_margin == Decimal("38.46")

    def test_margin_when_price_is_zero(self):
        assert self._product(sale_price=Decimal("0")).profit_margin == Decimal("0.00")

    @pytest.mark.parametrize("stock,status", [
        ("0", "Out of Stock"),
        ("5", "Low Stock"),
        ("6", "In Stock"),
    ])
    def test_stock_status(self, stock, status):
        assert self._product(stock_quantity=Decimal(stock)).stock_status == status

    def test_primary_code_prefers_sku(self):
        assert self._product(sku="KHD-1", barcode="8901").primary_code == "KHD-1"
        assert self._product(barcode="8901").primary_code == "8901"
        assert self._product().primary_code == ""


class TestCustomer:
    @pytest.mark.parametrize("orders,label", [(0, "New"), (1, "Second-time"), (3, "Regular"), (5, "Loyal")])
    def test_customer_type(self, orders, label):
        assert Customer(name="x", total_orders=orders).customer_type == label

    def test_average_order_value(self):
        assert Customer(name="x", total_orders=0).average_order_value == Decimal("0.00")
        customer = Customer(name="x", total_orders=3, total_purchases=Decimal("1000.00"))
        assert customer.average_order_value == Decimal("333.33")


def test_user_is_admin():
    assert User(role="Admin").is_admin
    assert not User(role="Staff").is_admin


def test_numeric_helpers_round_half_up():
    assert money("2.345") == Decimal("2.35")
    assert quantity("1.0005") == Decimal("1.001")
    assert to_decimal(0.1) == Decimal("0.1")
    assert to_decimal(None) == Decimal("0")


def test_to_utc_z():
    assert to_utc_z(None) is None
    assert to_utc_z(date(2024, 1, 2)) == "2024-01-02T00:00:00Z"
    aware = datetime(2024, 1, 2, 5, 30, tzinfo=timezone.utc)
    assert to_utc_z(aware) == "2024-01-02T05:30:00Z"

"""
Reference rows every store database starts with.

Each row carries a fixed id. seed_service.apply_seed_data() guarantees that a row
with that id exists, so these lists can be applied any number of times.

Timestamps are filled in when the row is inserted. The admin password appears
here only as the default plaintext that gets bcrypt-hashed at insert time.
"""
from __future__ import annotations

from decimal import Decimal

DEFAULT_ADMIN_PASSWORD = "Admin@123"

CATEGORIES = [
    {"id": 1, "name": "Men's Kurtas", "description": "Traditional kurtas for men", "is_active": True},
    {"id": 2, "name": "Women's Kurtas", "description": "Traditional kurtas for women", "is_active": True},
    {"id": 3, "name": "Dhotis", "description": "Traditional dhotis", "is_active": True},
    {"id": 4, "name": "Sarees", "description": "Traditional sarees", "is_active": True},
    {"id": 5, "name": "Shirts", "description": "Khadi shirts", "is_active": True},
    {"id": 6, "name": "Fabrics", "description": "Khadi fabrics by meter", "is_active": True},
    {"id": 7, "name": "Accessories", "description": "Khadi accessories and bags", "is_active": True},
]

USERS = [
    {
        "id": 1,
        "username": "admin",
        "full_name": "Store Administrator",
        "email": "admin@khadistore.com",
        "role": "Admin",
        "is_active": True,
    },
]

SETTINGS = [
    {"id": 1, "key": "StoreName", "value": "Bhavena Khadi Bhavan", "description": "Store name for invoices", "category": "Store"},
    {
        "id": 2,
        "key": "StoreAddress",
        "value": "Shop No 102, Viklang Mart, Nr. Water Tank, Kaliyabid, Bhavnagar, Gujarat - 364002",
        "description": "Store address",
        "category": "Store",
    },
    {"id": 3, "key": "StorePhone", "value": "+91 278-4051174", "description": "Store phone number", "category": "Store"},
    {"id": 4, "key": "GSTNumber", "value": "27AAAAA0000A1Z5", "description": "Store GST number", "category": "Tax"},
    {"id": 5, "key": "InvoicePrefix", "value": "KHD", "description": "Invoice number prefix", "category": "Store"},
    {"id": 6, "key": "ReturnPrefix", "value": "RET", "description": "Return number prefix", "category": "Store"},
    {"id": 7, "key": "DefaultGSTRate", "value": "5.0", "description": "Default GST rate percentage", "category": "Tax"},
    {"id": 8, "key": "LowStockThreshold", "value": "5", "description": "Default low stock threshold", "category": "Inventory"},
    {"id": 9, "key": "Currency", "value": "INR", "description": "Store currency", "category": "Store"},
]


def _product(id, name, description, category_id, purchase, sale, stock, minimum, sku, fabric, color, size, pattern, unit="Piece"):
    return {
        "id": id,
        "name": name,
        "description": description,
        "category_id": category_id,
        "purchase_price": Decimal(purchase),
        "sale_price": Decimal(sale),
        "gst_rate": Decimal("5.00"),
        "stock_quantity": Decimal(stock),
        "minimum_stock": Decimal(minimum),
        "sku": sku,
        "fabric_type": fabric,
        "color": color,
        "size": size,
        "pattern": pattern,
        "unit_of_measure": unit,
        "is_active": True,
    }


_MENS_KURTA = ("Cotton Khadi Kurta", "Pure cotton khadi kurta in white color", 1, "400.00", "650.00")
_WOMENS_KURTA = ("Women's Khadi Kurta", "Cotton khadi kurta for women in pink", 2, "380.00", "580.00")

PRODUCTS = [
    # Men's kurta, white, M/L/XL
    _product(1, *_MENS_KURTA, "25", "5", "KHD-CK-W-M-001", "Cotton Khadi", "White", "M", "Solid"),
    _product(2, *_MENS_KURTA, "20", "5", "KHD-CK-W-L-002", "Cotton Khadi", "White", "L", "Solid"),
    _product(3, *_MENS_KURTA, "15", "5", "KHD-CK-W-XL-003", "Cotton Khadi", "White", "XL", "Solid"),
    # Women's kurta, pink, S/M/L
    _product(4, *_WOMENS_KURTA, "30", "8", "KHD-WK-P-S-004", "Cotton Khadi", "Pink", "S", "Printed"),
    _product(5, *_WOMENS_KURTA, "25", "8", "KHD-WK-P-M-005", "Cotton Khadi", "Pink", "M", "Printed"),
    _product(6, *_WOMENS_KURTA, "20", "8", "KHD-WK-P-L-006", "Cotton Khadi", "Pink", "L", "Printed"),
    _product(
        7, "Silk Khadi Saree", "Handwoven silk khadi saree in royal blue", 4, "1200.00", "1800.00",
        "15", "3", "KHD-SS-B-001", "Silk Khadi", "Blue", "Free Size", "Handloom",
    ),
    _product(
        8, "Traditional Dhoti", "Pure cotton dhoti in cream color", 3, "300.00", "480.00",
        "20", "5", "KHD-D-C-001", "Cotton Khadi", "Cream", "Free Size", "Solid",
    ),
    _product(
        9, "Khadi Cotton Fabric", "Pure khadi cotton fabric per meter", 6, "80.00", "120.00",
        "100", "20", "KHD-CF-N-001", "Cotton Khadi", "Natural", "Per Meter", "Plain", unit="Meter",
    ),
]

CUSTOMERS = [
    {
        "id": 1,
        "name": "Rajesh Kumar",
        "phone": "9876543210",
        "email": "rajesh@example.com",
        "address": "456 MG Road, Mumbai, Maharashtra - 400001",
        "total_orders": 0,
        "total_purchases": Decimal("0.00"),
    },
    {
        "id": 2,
        "name": "Priya Sharma",
        "phone": "9876543211",
        "email": "priya@example.com",
        "address": "789 Park Street, Delhi - 110001",
        "total_orders": 0,
        "total_purchases": Decimal("0.00"),
    },
]

# Demonstration sale (inserted only on request, never by the reference seed)
DEMO_SALE = {
    "invoice_number": "KHD000001",
    "customer_id": 1,
    "payment_method": "Cash",
    "subtotal": Decimal("650.00"),
    "gst_amount": Decimal("32.50"),
    "discount_percentage": Decimal("0.00"),
    "discount_amount": Decimal("0.00"),
    "total_amount": Decimal("682.50"),
    "status": "Completed",
}

DEMO_SALE_ITEM = {
    "product_id": 1,
    "product_name": "Cotton Khadi Kurta",
    "quantity": Decimal("1.000"),
    "unit_price": Decimal("650.00"),
    "gst_rate": Decimal("5.00"),
    "gst_amount": Decimal("32.50"),
    "line_total": Decimal("682.50"),
    "unit_of_measure": "Piece",
    "item_discount_percentage": Decimal("0.00"),
    "item_discount_amount": Decimal("0.00"),
}

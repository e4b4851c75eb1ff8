from .catalog import Category, Product
from .customers import Customer
from .sales import Sale, SaleItem
from .returns import Return, ReturnItem
from .auth import User, ROLE_ADMIN, ROLE_STAFF
from .settings import Setting

__all__ = [
    'Category', 'Product',
    'Customer',
    'Sale', 'SaleItem',
    'Return', 'ReturnItem',
    'User', 'ROLE_ADMIN', 'ROLE_STAFF',
    'Setting',
]

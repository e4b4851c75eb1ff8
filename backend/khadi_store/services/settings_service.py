from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from ..extensions import db
from ..errors import commit_or_raise
from ..models import Setting
from ..numeric import percent


# Keys seeded on first run (see seed_data.SETTINGS)
STORE_NAME = "StoreName"
STORE_ADDRESS = "StoreAddress"
STORE_PHONE = "StorePhone"
GST_NUMBER = "GSTNumber"
INVOICE_PREFIX = "InvoicePrefix"
RETURN_PREFIX = "ReturnPrefix"
DEFAULT_GST_RATE = "DefaultGSTRate"
LOW_STOCK_THRESHOLD = "LowStockThreshold"
CURRENCY = "Currency"


class SettingsError(ValueError):
    pass


class SettingsValidationError(SettingsError):
    pass


class SettingsNotFoundError(SettingsError):
    pass


@dataclass(frozen=True)
class StoreProfile:
    """Header block printed on invoices and return slips."""
    name: str
    address: str
    phone: str
    gst_number: str
    invoice_prefix: str
    return_prefix: str
    currency: str


def get_setting(key: str) -> Setting:
    setting = db.session.query(Setting).filter(Setting.key == key).first()
    if setting is None:
        raise SettingsNotFoundError(f"Setting {key} not found")
    return setting


def get_value(key: str, default: str | None = None) -> str | None:
    setting = db.session.query(Setting).filter(Setting.key == key).first()
    if setting is None or setting.value is None:
        return default
    return setting.value


def get_decimal(key: str, default: Decimal | None = None) -> Decimal | None:
    raw = get_value(key)
    if raw is None:
        return default
    try:
        return Decimal(raw.strip())
    except InvalidOperation as exc:
        raise SettingsValidationError(f"Setting {key} is not a number: {raw!r}") from exc


def get_int(key: str, default: int | None = None) -> int | None:
    raw = get_value(key)
    if raw is None:
        return default
    try:
        return int(raw.strip())
    except ValueError as exc:
        raise SettingsValidationError(f"Setting {key} is not an integer: {raw!r}") from exc


def default_gst_rate() -> Decimal:
    rate = get_decimal(DEFAULT_GST_RATE, Decimal("5"))
    if rate < 0 or rate > 100:
        raise SettingsValidationError(f"{DEFAULT_GST_RATE} must be between 0 and 100")
    return percent(rate)


def low_stock_threshold() -> int:
    return get_int(LOW_STOCK_THRESHOLD, 5)


def store_profile() -> StoreProfile:
    return StoreProfile(
        name=get_value(STORE_NAME, ""),
        address=get_value(STORE_ADDRESS, ""),
        phone=get_value(STORE_PHONE, ""),
        gst_number=get_value(GST_NUMBER, ""),
        invoice_prefix=get_value(INVOICE_PREFIX, "INV"),
        return_prefix=get_value(RETURN_PREFIX, "RET"),
        currency=get_value(CURRENCY, "INR"),
    )


def create_setting(key: str, value: str | None, description: str | None = None, category: str = "General") -> Setting:
    """Raises UniqueViolation when the key already exists."""
    if not key or not key.strip():
        raise SettingsValidationError("Setting key is required")
    setting = Setting(key=key.strip(), value=value, description=description, category=category)
    db.session.add(setting)
    commit_or_raise()
    return setting


def set_value(key: str, value: str | None) -> Setting:
    """Update an existing setting's value."""
    if value is not None and len(value) > 500:
        raise SettingsValidationError("Setting value cannot exceed 500 characters")
    setting = get_setting(key)
    setting.value = value
    commit_or_raise()
    return setting


def list_settings(category: str | None = None) -> list[Setting]:
    query = db.session.query(Setting)
    if category:
        query = query.filter(Setting.category == category)
    return query.order_by(Setting.category.asc(), Setting.key.asc()).all()

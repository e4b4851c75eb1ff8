"""
Error taxonomy for the Khadi Store schema layer.

Storage-level constraint failures arrive as sqlalchemy IntegrityError with a
driver-specific message. translate_integrity_error() turns them into distinct
exception kinds so callers can map them to user-facing text ("Invoice number
already used") without parsing driver strings themselves.

Hierarchy:
    SchemaError
      ConstraintViolation
        UniqueViolation
        CheckViolation
        ForeignKeyViolation
          RestrictedDeleteError  (raised by pre-delete checks, before any SQL)
      MissingReferenceError
      BootstrapError
"""
from __future__ import annotations

import re
from typing import Iterable, Optional

from sqlalchemy.exc import IntegrityError

from .extensions import db


class SchemaError(Exception):
    """Base class for every error raised by this package."""


class ConstraintViolation(SchemaError):
    """A write was rejected by a storage-level constraint."""

    kind = "constraint"

    def __init__(
        self,
        message: str,
        *,
        constraint: Optional[str] = None,
        table: Optional[str] = None,
        columns: Iterable[str] = (),
    ):
        super().__init__(message)
        self.message = message
        self.constraint = constraint
        self.table = table
        self.columns = tuple(columns)

    @property
    def column(self) -> Optional[str]:
        return self.columns[0] if self.columns else None

    def to_dict(self) -> dict:
        return {
            "error": self.kind,
            "message": self.message,
            "constraint": self.constraint,
            "table": self.table,
            "columns": list(self.columns),
        }


class UniqueViolation(ConstraintViolation):
    kind = "unique_violation"


class CheckViolation(ConstraintViolation):
    kind = "check_violation"


class ForeignKeyViolation(ConstraintViolation):
    kind = "foreign_key_violation"


class RestrictedDeleteError(ForeignKeyViolation):
    """Delete refused because dependent rows still reference the target."""

    kind = "restricted_delete"

    def __init__(self, table: str, row_id: int, dependents: dict[str, int]):
        self.row_id = row_id
        self.dependents = dict(dependents)
        detail = ", ".join(f"{count} {name}" for name, count in sorted(self.dependents.items()))
        super().__init__(f"Cannot delete {table} #{row_id}: still referenced by {detail}", table=table)


class MissingReferenceError(SchemaError):
    """A row required by a seeding path does not exist."""

    def __init__(self, table: str, row_id: int):
        self.table = table
        self.row_id = row_id
        super().__init__(f"{table} #{row_id} not found")


class BootstrapError(SchemaError):
    """Database could not be reached or migrated. Fatal to startup."""


# Messages shown to store staff for the constraints they are most likely to hit.
UNIQUE_MESSAGES = {
    ("sales", "invoice_number"): "Invoice number already used",
    ("returns", "return_number"): "Return number already used",
    ("categories", "name"): "A category with this name already exists",
    ("users", "username"): "Username is already taken",
    ("users", "email"): "Email address is already registered",
    ("settings", "key"): "A setting with this key already exists",
}

CHECK_MESSAGES = {
    "ck_sale_items_item_discount_percentage": "Item discount percentage must be between 0 and 100",
    "ck_sale_items_item_discount_amount": "Item discount amount cannot be negative",
}

_SQLITE_UNIQUE_RE = re.compile(r"UNIQUE constraint failed: (?P<cols>[\w\.\s,]+)")
_SQLITE_CHECK_RE = re.compile(r"CHECK constraint failed: (?P<name>[\w]+)")
_PG_CONSTRAINT_RE = re.compile(r'constraint "(?P<name>[^"]+)"')
_PG_KEY_RE = re.compile(r"Key \((?P<cols>[^)]+)\)")

_PG_UNIQUE = "23505"
_PG_FOREIGN_KEY = "23503"
_PG_CHECK = "23514"


def _constraint_catalog() -> dict[str, tuple[str, tuple[str, ...]]]:
    """Map constraint/index name -> (table, columns) from the mapped metadata."""
    catalog: dict[str, tuple[str, tuple[str, ...]]] = {}
    for table in db.metadata.tables.values():
        for constraint in table.constraints:
            if constraint.name:
                cols = tuple(c.name for c in getattr(constraint, "columns", []))
                catalog[str(constraint.name)] = (table.name, cols)
        for index in table.indexes:
            if index.name:
                catalog[str(index.name)] = (table.name, tuple(c.name for c in index.columns))
    return catalog


def _unique_message(table: Optional[str], columns: tuple[str, ...]) -> str:
    if table and columns:
        known = UNIQUE_MESSAGES.get((table, columns[0]))
        if known:
            return known
        return f"Duplicate value for {table}.{', '.join(columns)}"
    return "Duplicate value violates a unique constraint"


def _from_sqlite(text: str) -> Optional[ConstraintViolation]:
    match = _SQLITE_UNIQUE_RE.search(text)
    if match:
        qualified = [part.strip() for part in match.group("cols").split(",") if part.strip()]
        table = qualified[0].split(".")[0] if qualified else None
        columns = tuple(part.split(".")[-1] for part in qualified)
        return UniqueViolation(_unique_message(table, columns), table=table, columns=columns)

    match = _SQLITE_CHECK_RE.search(text)
    if match:
        name = match.group("name")
        table, columns = _constraint_catalog().get(name, (None, ()))
        if not columns:
            columns = _check_columns(name)
        message = CHECK_MESSAGES.get(name, f"Check constraint {name} failed")
        return CheckViolation(message, constraint=name, table=table or _check_table(name), columns=columns)

    if "FOREIGN KEY constraint failed" in text:
        return ForeignKeyViolation("Row is still referenced by, or refers to a missing, related record")

    return None


def _from_postgres(orig, text: str) -> Optional[ConstraintViolation]:
    code = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    diag = getattr(orig, "diag", None)
    name = getattr(diag, "constraint_name", None)
    if not name:
        match = _PG_CONSTRAINT_RE.search(text)
        name = match.group("name") if match else None
    table, columns = _constraint_catalog().get(name, (getattr(diag, "table_name", None), ())) if name else (None, ())
    if not columns:
        match = _PG_KEY_RE.search(text)
        if match:
            columns = tuple(col.strip() for col in match.group("cols").split(","))

    if code == _PG_UNIQUE:
        return UniqueViolation(_unique_message(table, columns), constraint=name, table=table, columns=columns)
    if code == _PG_CHECK:
        message = CHECK_MESSAGES.get(name or "", f"Check constraint {name} failed")
        return CheckViolation(message, constraint=name, table=table, columns=columns or _check_columns(name or ""))
    if code == _PG_FOREIGN_KEY:
        return ForeignKeyViolation(
            "Row is still referenced by, or refers to a missing, related record",
            constraint=name,
            table=table,
            columns=columns,
        )
    return None


def _check_table(name: str) -> Optional[str]:
    if name.startswith("ck_sale_items_"):
        return "sale_items"
    return None


def _check_columns(name: str) -> tuple[str, ...]:
    if name.startswith("ck_sale_items_"):
        return (name[len("ck_sale_items_"):],)
    return ()


def translate_integrity_error(exc: IntegrityError) -> ConstraintViolation:
    """Classify an IntegrityError into a ConstraintViolation subclass."""
    orig = getattr(exc, "orig", None)
    text = str(orig) if orig is not None else str(exc)

    translated = None
    if orig is not None and (hasattr(orig, "pgcode") or hasattr(orig, "sqlstate")):
        translated = _from_postgres(orig, text)
    if translated is None:
        translated = _from_sqlite(text)
    if translated is None:
        translated = ConstraintViolation(f"Integrity error: {text}")
    translated.__cause__ = exc
    return translated


def commit_or_raise() -> None:
    """
    Commit the current session, translating constraint failures.

    On failure the session is rolled back before the translated error is raised.
    """
    try:
        db.session.commit()
    except IntegrityError as exc:
        db.session.rollback()
        raise translate_integrity_error(exc) from exc


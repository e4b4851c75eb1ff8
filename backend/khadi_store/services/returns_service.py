# backend/khadi_store/services/returns_service.py
"""
Return maintenance.

CASCADE Return -> ReturnItem. Deleting a return never touches the sale lines or
products its items point at.
"""
from __future__ import annotations

import logging

from ..extensions import db
from ..errors import commit_or_raise
from ..models import Return

logger = logging.getLogger(__name__)


def get_return_by_number(return_number: str) -> Return | None:
    return db.session.query(Return).filter(Return.return_number == return_number).first()


def delete_return(return_id: int) -> None:
    ret = db.session.get(Return, return_id)
    if ret is None:
        raise LookupError(f"Return {return_id} not found")

    return_number = ret.return_number
    db.session.delete(ret)
    commit_or_raise()
    logger.info("Deleted return %s (%s)", return_id, return_number)

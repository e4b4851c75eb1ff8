# backend/khadi_store/routes/system.py
"""
System health and version endpoints.
"""

import sys
import time
from flask import Blueprint, current_app
from ..extensions import db
from ..models import Category, Customer, Product, Sale, Setting, User
from ..services import bootstrap_service
from khadi_store.time_utils import utcnow

system_bp = Blueprint("system", __name__)


def check_database_health() -> dict:
    """
    Check database connectivity and that the reference data is present.

    Returns dict with status and details.
    """
    start_time = time.time()
    try:
        details = {
            "categories": db.session.query(Category).count(),
            "products": db.session.query(Product).count(),
            "customers": db.session.query(Customer).count(),
            "sales": db.session.query(Sale).count(),
            "users": db.session.query(User).count(),
            "settings": db.session.query(Setting).count(),
        }
        elapsed_ms = (time.time() - start_time) * 1000

        if details["users"] == 0 or details["settings"] == 0:
            return {
                "status": "degraded",
                "latency_ms": round(elapsed_ms, 2),
                "warning": "Reference data not seeded; run 'flask system init'",
                "details": details,
            }

        return {
            "status": "healthy",
            "latency_ms": round(elapsed_ms, 2),
            "details": details,
        }
    except Exception:
        elapsed_ms = (time.time() - start_time) * 1000
        current_app.logger.exception("Database health check failed")
        return {
            "status": "unhealthy",
            "latency_ms": round(elapsed_ms, 2),
            "error": "Database error",
        }


def check_schema_health() -> dict:
    """Report unapplied migrations."""
    try:
        pending = bootstrap_service.pending_migrations(current_app._get_current_object())
    except Exception:
        current_app.logger.exception("Schema version check failed")
        return {"status": "unhealthy", "error": "Migration history unavailable"}

    if pending:
        return {"status": "degraded", "pending_migrations": pending}
    return {"status": "healthy", "pending_migrations": []}


@system_bp.get("/health")
def health():
    """
    Health check endpoint.

    Returns:
    - 200: healthy or degraded
    - 503: database unreachable
    """
    database_health = check_database_health()
    schema_health = check_schema_health()

    all_checks = [database_health, schema_health]
    if any(check["status"] == "unhealthy" for check in all_checks):
        overall_status, http_status = "unhealthy", 503
    elif any(check["status"] == "degraded" for check in all_checks):
        overall_status, http_status = "degraded", 200
    else:
        overall_status, http_status = "healthy", 200

    return {
        "status": overall_status,
        "timestamp": utcnow().isoformat() + "Z",
        "checks": {
            "database": database_health,
            "schema": schema_health,
        },
    }, http_status


@system_bp.get("/version")
def version():
    """
    Version endpoint for deployment debugging.

    Does NOT expose secret keys, database credentials or internal paths.
    """
    env = "production" if not current_app.debug else "development"

    return {
        "api_version": "1.0.0",
        "environment": env,
        "python_version": sys.version.split()[0],
        "server_time": utcnow().isoformat() + "Z",
    }

# backend/khadi_store/config.py
from __future__ import annotations
import os


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


class Config:
    # Optional "SECRET_KEY", with default dev key
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    # SQLite DB stored in backend/instance/khadi_store.sqlite3
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL", #optional alternative location
        "sqlite:///khadi_store.sqlite3", #default local location
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Migration scripts live next to the package (backend/migrations)
    MIGRATIONS_DIRECTORY = os.environ.get(
        "MIGRATIONS_DIRECTORY",
        os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "migrations"),
    )

    # Insert the demonstration sale (KHD000001) during `flask system init`
    SEED_DEMO_SALE = _env_flag("KHADI_SEED_DEMO_SALE", default=False)

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

from __future__ import annotations

from ..extensions import db
from khadi_store.time_utils import to_utc_z

ROLE_ADMIN = "Admin"
ROLE_STAFF = "Staff"


class User(db.Model):
    """
    Store staff account.

    Username and email are unique across the whole store database.
    password_hash holds a bcrypt hash; plaintext is never stored.
    """
    __tablename__ = "users"
    __table_args__ = (
        db.Index("ix_users_username", "username", unique=True),
        db.Index("ix_users_email", "email", unique=True),
        db.Index("ix_users_is_active", "is_active"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(50), nullable=False)
    full_name = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(100), nullable=False)

    # Bcrypt hashed password
    password_hash = db.Column(db.String(255), nullable=False)

    role = db.Column(db.String(20), nullable=False, default=ROLE_STAFF, server_default=ROLE_STAFF)  # Admin, Staff
    is_active = db.Column(db.Boolean, nullable=False, default=True, server_default=db.true())

    created_at = db.Column(db.DateTime, nullable=False, server_default=db.func.now())
    last_login_at = db.Column(db.DateTime, nullable=True)

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "username": self.username,
            "full_name": self.full_name,
            "email": self.email,
            "role": self.role,
            "is_active": self.is_active,
            "created_at": to_utc_z(self.created_at),
            "last_login_at": to_utc_z(self.last_login_at) if self.last_login_at else None,
        }

from __future__ import annotations

from ..extensions import db
from khadi_store.time_utils import to_utc_z


class Setting(db.Model):
    """
    Key-value store configuration (store name, GST number, invoice prefix...).

    Values are stored as text; typed access goes through settings_service.
    """
    __tablename__ = "settings"
    __table_args__ = (
        db.Index("ix_settings_key", "key", unique=True),
        db.Index("ix_settings_category", "category"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    key = db.Column(db.String(100), nullable=False)
    value = db.Column(db.String(500), nullable=True)
    description = db.Column(db.String(200), nullable=True)
    category = db.Column(db.String(100), nullable=False, default="General", server_default="General")
    updated_at = db.Column(db.DateTime, nullable=False, server_default=db.func.now(), onupdate=db.func.now())

    def to_dict(self):
        return {
            "id": self.id,
            "key": self.key,
            "value": self.value,
            "description": self.description,
            "category": self.category,
            "updated_at": to_utc_z(self.updated_at),
        }

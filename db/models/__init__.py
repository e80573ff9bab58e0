"""
Model package exports.

Import all SQLAlchemy models here so metadata registration and Alembic
autogeneration work without extra imports.
"""

from db.models.price_record import PriceRecord

__all__ = [
    "PriceRecord",
]

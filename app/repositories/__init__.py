"""
app/repositories package marker.
"""

from app.repositories.price_repository import PriceRepository, PriceStore

__all__ = [
    "PriceRepository",
    "PriceStore",
]

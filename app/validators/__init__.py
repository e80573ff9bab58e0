"""
app/validators package marker.
"""

from app.validators.price_row_validator import PriceRowValidator

__all__ = [
    "PriceRowValidator",
]

"""
app/schemas package marker.
"""

from app.schemas.price_ingestion import HealthResponse, PriceIngestionSummaryResponse

__all__ = [
    "HealthResponse",
    "PriceIngestionSummaryResponse",
]

"""
app/schemas/price_ingestion.py

Response schemas for price archive endpoints.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from app.domain.price_archive import IngestionSummary


class PriceIngestionSummaryResponse(BaseModel):
    """
    API response model for one archive ingestion.
    """

    total_items: int = Field(..., ge=0)
    total_categories: int = Field(..., ge=0)
    total_price: float = Field(..., ge=0)

    @classmethod
    def from_summary(cls, summary: IngestionSummary) -> "PriceIngestionSummaryResponse":
        return cls(
            total_items=summary.total_items,
            total_categories=summary.total_categories,
            total_price=float(summary.total_price),
        )


class HealthResponse(BaseModel):
    """
    API response model for the health endpoint.
    """

    status: str
    database: bool

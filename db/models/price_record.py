"""
db/models/price_record.py

Persisted price row. One table, written by ingest and read by export.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from sqlalchemy import Date, DateTime, Index, Integer, Numeric, Text
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base
from db.config import get_price_table_settings

PRICE_SCALE = 2

# DATE or TIMESTAMP is fixed for the lifetime of a deployment.
_TABLE_SETTINGS = get_price_table_settings()
CREATE_DATE_IS_TIMESTAMP = _TABLE_SETTINGS.stores_timestamps


class PriceRecord(Base):
    __tablename__ = "prices"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    product_id: Mapped[int | None] = mapped_column(
        Integer,
        nullable=True,
        comment="Identifier column from the uploaded CSV, when stored",
    )
    name: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[str] = mapped_column(Text, nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(10, PRICE_SCALE), nullable=False)
    create_date: Mapped[date] = mapped_column(
        DateTime(timezone=False) if CREATE_DATE_IS_TIMESTAMP else Date,
        nullable=False,
    )

    __table_args__ = (Index("ix_prices_category", "category"),)

    def __repr__(self) -> str:
        return (
            f"<PriceRecord id={self.id} name={self.name!r} "
            f"category={self.category!r} price={self.price}>"
        )

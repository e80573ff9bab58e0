"""
app/repositories/price_repository.py

Persistence layer for price rows.

``PriceStore`` is the storage capability the ingest and export services
receive; ``PriceRepository`` implements it on a SQLAlchemy session.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import AbstractContextManager, contextmanager
from datetime import datetime, time
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Protocol

from sqlalchemy import insert, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.domain.errors import PriceInsertError, PriceStoreError
from app.domain.price_archive import PriceRow, StoredPrice
from db.config import PriceTableSettings, get_price_table_settings
from db.models.price_record import CREATE_DATE_IS_TIMESTAMP, PRICE_SCALE, PriceRecord

_PRICE_QUANTUM = Decimal(1).scaleb(-PRICE_SCALE)
_DEFAULT_YIELD_PER = 500


class PriceStore(Protocol):
    """
    Begin-transaction / insert / query capability over the prices table.
    """

    def transaction(self) -> AbstractContextManager[None]:
        """Open one atomic unit; commit on clean exit, roll back on error."""

    def insert(self, row: PriceRow) -> int:
        """Insert one row and return its identifier. Raises PriceInsertError."""

    def iter_records(self) -> Iterator[StoredPrice]:
        """Yield every stored row ordered by ascending identifier."""


class PriceRepository:
    """
    SQLAlchemy-backed PriceStore.

    Each insert runs inside a SAVEPOINT so that a rejected row leaves the
    enclosing transaction usable.
    """

    def __init__(
        self,
        session: Session,
        *,
        table_settings: PriceTableSettings | None = None,
        yield_per: int = _DEFAULT_YIELD_PER,
    ) -> None:
        self._session = session
        self._table_settings = table_settings or get_price_table_settings()
        self._yield_per = max(1, yield_per)

    @contextmanager
    def transaction(self) -> Iterator[None]:
        try:
            self._session.begin()
        except SQLAlchemyError as exc:
            raise PriceStoreError("Unable to open database transaction.") from exc
        try:
            # Acquire the connection now so an unreachable database fails here.
            self._session.connection()
        except SQLAlchemyError as exc:
            self._session.rollback()
            raise PriceStoreError("Unable to open database transaction.") from exc

        try:
            yield
        except BaseException:
            self._session.rollback()
            raise

        try:
            self._session.commit()
        except SQLAlchemyError as exc:
            self._session.rollback()
            raise PriceStoreError("Unable to commit database transaction.") from exc

    def insert(self, row: PriceRow) -> int:
        try:
            stmt = insert(PriceRecord).values(self._payload(row)).returning(PriceRecord.id)
            with self._session.begin_nested():
                return self._session.scalars(stmt).one()
        except (SQLAlchemyError, InvalidOperation) as exc:
            raise PriceInsertError(f"Insert rejected for {row.name!r}: {exc}") from exc

    def iter_records(self) -> Iterator[StoredPrice]:
        stmt = (
            select(PriceRecord)
            .order_by(PriceRecord.id.asc())
            .execution_options(yield_per=self._yield_per)
        )
        try:
            for record in self._session.scalars(stmt):
                yield StoredPrice(
                    id=record.id,
                    product_id=record.product_id,
                    name=record.name,
                    category=record.category,
                    price=record.price,
                    create_date=record.create_date,
                )
        except SQLAlchemyError as exc:
            raise PriceStoreError("Unable to read stored prices.") from exc

    def _payload(self, row: PriceRow) -> dict[str, Any]:
        create_date: Any = row.create_date
        if CREATE_DATE_IS_TIMESTAMP:
            create_date = datetime.combine(row.create_date, time.min)

        payload: dict[str, Any] = {
            "name": row.name,
            "category": row.category,
            "price": row.price.quantize(_PRICE_QUANTUM, rounding=ROUND_HALF_UP),
            "create_date": create_date,
        }
        if self._table_settings.store_product_id:
            payload["product_id"] = row.product_id
        return payload

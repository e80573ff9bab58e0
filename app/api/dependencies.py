"""
app/api/dependencies.py

Shared FastAPI dependencies for request payloads and storage access.
"""

from __future__ import annotations

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.orm import Session
from starlette.datastructures import UploadFile
from starlette.formparsers import MultiPartException

from app.config import get_price_ingestion_settings
from app.repositories.price_repository import PriceRepository, PriceStore
from db.session import get_db

UPLOAD_FIELD_NAME = "file"


def _too_large(limit: int) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
        detail=f"Upload exceeds {limit} bytes.",
    )


async def get_archive_payload(request: Request) -> bytes:
    """
    Return the uploaded archive bytes.

    Accepts either a ``multipart/form-data`` upload with a ``file`` field or
    the archive as the raw request body.
    """

    limit = get_price_ingestion_settings().max_upload_bytes
    declared_length = request.headers.get("content-length", "")
    if declared_length.isdigit() and int(declared_length) > limit:
        raise _too_large(limit)

    content_type = (request.headers.get("content-type") or "").lower()
    if "multipart/form-data" in content_type:
        try:
            form = await request.form()
        except MultiPartException as exc:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Failed to parse form.",
            ) from exc
        upload = form.get(UPLOAD_FIELD_NAME)
        if not isinstance(upload, UploadFile):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Form field {UPLOAD_FIELD_NAME!r} with an archive file is required.",
            )
        try:
            payload = await upload.read()
        finally:
            await upload.close()
    else:
        payload = await request.body()

    if len(payload) > limit:
        raise _too_large(limit)
    if not payload:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Empty data.",
        )
    return payload


def get_price_store(db: Session = Depends(get_db)) -> PriceStore:
    """
    Storage capability bound to the request's database session.
    """

    return PriceRepository(db)

# clip2recipe/app/routers/uploads.py
"""
Upload registration. Records the source descriptor and hands back a storage
target; the pipeline itself never touches the storage payload.
"""
from __future__ import annotations

import logging
from typing import Any
from uuid import uuid4

from fastapi import APIRouter, Body, Depends, status
from pydantic import ValidationError

from clip2recipe.app.deps import get_storage, get_upload_repo
from clip2recipe.app.domain.models import SourceType, UploadRecord, UploadTicket
from clip2recipe.app.infra.db.base import UploadRepository
from clip2recipe.app.infra.storage.base import StorageProvider
from clip2recipe.app.routers.errors import error_response
from clip2recipe.app.schemas.uploads import (
    CreateUploadResponse,
    UrlUploadRequest,
    create_upload_adapter,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Uploads"])


def register_upload(
    descriptor: Any,
    uploads: UploadRepository,
    storage: StorageProvider,
) -> UploadTicket:
    """
    Validate ``descriptor`` and persist it as an UploadRecord.

    Raises:
        ValidationError: If the descriptor is neither a valid file nor URL source
    """
    parsed = create_upload_adapter.validate_python(descriptor)
    upload_id = f"upl_{uuid4()}"
    record = UploadRecord(
        source_type=SourceType(parsed.source_type),
        filename=parsed.filename,
        size_bytes=parsed.size_bytes,
        source_url=str(parsed.source_url) if isinstance(parsed, UrlUploadRequest) else None,
    )
    uploads.put(upload_id, record)
    logger.info(
        "upload.created upload=%s source_type=%s filename=%s",
        upload_id,
        record.source_type.value,
        record.filename,
    )
    return UploadTicket(upload_id=upload_id, storage_handoff=storage.generate_upload_handoff(upload_id))


@router.post(
    "/create-upload",
    response_model=CreateUploadResponse,
    responses={status.HTTP_400_BAD_REQUEST: {"description": "Invalid upload descriptor"}},
)
async def create_upload(
    payload: Any = Body(...),
    uploads: UploadRepository = Depends(get_upload_repo),
    storage: StorageProvider = Depends(get_storage),
):
    """
    Register a file or URL source.

    File sources need ``size_bytes > 0``; URL sources accept ``0`` but need a
    well-formed ``source_url``.
    """
    try:
        ticket = register_upload(payload, uploads, storage)
    except ValidationError as e:
        return error_response(status.HTTP_400_BAD_REQUEST, "invalid_request", str(e))

    return CreateUploadResponse(upload_id=ticket.upload_id, s3_fields=ticket.storage_handoff)

"""Upload endpoint: accept one image or document per request and store it under the public directory."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request, status
from starlette.datastructures import UploadFile

from app.api.deps import get_current_user, get_upload_store
from app.schemas.auth import TokenClaims
from app.schemas.upload import UploadResponse
from app.services.upload_store import (
    UploadStore,
    UploadStoreError,
    UploadTooLargeError,
    UploadValidationError,
)

router = APIRouter()

logger = logging.getLogger(__name__)

# Allowance for multipart boundaries and part headers on top of the file ceiling.
MULTIPART_OVERHEAD_BYTES = 64 * 1024


def _is_upload_file(obj: object) -> bool:
    """True if obj is an uploaded file (UploadFile or file-like with filename and read)."""
    if isinstance(obj, UploadFile):
        return True
    return (
        hasattr(obj, "read")
        and callable(getattr(obj, "read", None))
        and hasattr(obj, "filename")
    )


def _check_content_length(request: Request, max_bytes: int) -> None:
    """Reject a declared body larger than the ceiling before any of it is read."""
    raw = request.headers.get("content-length")
    if raw is None:
        return
    try:
        length = int(raw)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid Content-Length header.",
        ) from e
    if length > max_bytes + MULTIPART_OVERHEAD_BYTES:
        too_large = UploadTooLargeError(max_bytes)
        logger.warning("Upload rejected", extra={"reason": too_large.message})
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=too_large.message,
        )


@router.post("", response_model=UploadResponse)
async def upload_file(
    request: Request,
    user: Annotated[TokenClaims, Depends(get_current_user)],
    store: Annotated[UploadStore, Depends(get_upload_store)],
) -> UploadResponse:
    """
    Store a file sent as `multipart/form-data` in the `file` field.

    Only .jpeg/.jpg/.png/.gif/.pdf/.doc/.docx files with a matching allowed
    content type are accepted, up to the configured size ceiling. Returns the
    generated filename and the public URL the file is served from.

    The body is only read once the bearer token has been accepted.
    """
    _check_content_length(request, store.max_bytes)
    form = await request.form(max_files=1)
    try:
        file = form.get("file")
        if file is None or not _is_upload_file(file):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file uploaded")
        try:
            stored = await store.save(file)
        except UploadValidationError as e:
            logger.warning(
                "Upload rejected",
                extra={"original_name": (file.filename or "")[:255], "reason": e.message},
            )
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message) from e
        except UploadTooLargeError as e:
            logger.warning("Upload rejected", extra={"reason": e.message})
            raise HTTPException(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                detail=e.message,
            ) from e
        except UploadStoreError as e:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=e.message,
            ) from e
    finally:
        await form.close()

    logger.info("Upload accepted", extra={"uploaded_by": user.username})
    return UploadResponse(
        filename=stored.filename,
        original_name=stored.original_name,
        url=stored.url,
        size=stored.size,
    )

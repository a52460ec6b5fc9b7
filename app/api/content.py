"""Content endpoints: public reads of the content document, authenticated section replacement."""

import json
from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, Request, status
from starlette.concurrency import run_in_threadpool

from app.api.deps import get_content_store, get_current_user
from app.schemas.auth import TokenClaims
from app.schemas.content import ContentUpdateResponse
from app.services.content_store import (
    ContentStore,
    ContentStoreError,
    SectionNotFoundError,
)

router = APIRouter()


@router.get("")
def get_content(
    store: Annotated[ContentStore, Depends(get_content_store)],
) -> dict[str, Any]:
    """Return the full content document (empty if it cannot be read)."""
    return store.read_all()


@router.get("/{section}")
def get_section(
    section: str,
    store: Annotated[ContentStore, Depends(get_content_store)],
) -> Any:
    try:
        return store.read_section(section)
    except SectionNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message) from e


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def _is_json_content_type(content_type: str) -> bool:
    media_type = content_type.split(";")[0].strip().lower()
    return media_type == "application/json" or media_type.endswith("+json")


async def _read_json_body(request: Request) -> Any:
    """Parse the request body as strict JSON (no NaN/Infinity). Raises 400 otherwise."""
    if not _is_json_content_type(request.headers.get("content-type", "")):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Request body must be JSON (Content-Type: application/json).",
        )
    body = await request.body()
    try:
        return json.loads(body, parse_constant=_reject_constant)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid JSON: {e!s}",
        ) from e


@router.put("/{section}", response_model=ContentUpdateResponse)
async def put_section(
    section: str,
    request: Request,
    _user: Annotated[TokenClaims, Depends(get_current_user)],
    store: Annotated[ContentStore, Depends(get_content_store)],
) -> ContentUpdateResponse:
    """
    Replace a section with the request body.

    The body may be any JSON value; it replaces the section wholesale (no merge).
    Unknown sections are created. The body is only read once the bearer token
    has been accepted.
    """
    value = await _read_json_body(request)
    try:
        stored = await run_in_threadpool(store.write_section, section, value)
    except ContentStoreError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=e.message,
        ) from e
    return ContentUpdateResponse(data=stored)

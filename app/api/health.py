"""Health check endpoint with a content document readability check."""

from typing import Annotated

from fastapi import APIRouter, Depends

from app.api.deps import get_app_settings, get_content_store
from app.core.config import Settings
from app.schemas.health import HealthResponse
from app.services.content_store import ContentStore

router = APIRouter()


@router.get("", response_model=HealthResponse)
def get_health(
    settings: Annotated[Settings, Depends(get_app_settings)],
    store: Annotated[ContentStore, Depends(get_content_store)],
) -> HealthResponse:
    """
    Return service health status and whether the content document is readable.
    Used by load balancers and monitoring.
    """
    return HealthResponse(
        status="ok",
        environment=settings.APP_ENV,
        content="readable" if store.is_readable() else "unreadable",
    )

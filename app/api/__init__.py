"""API routes, mounted under settings.API_PREFIX."""

from fastapi import APIRouter

from app.api import auth, content, health, upload

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(content.router, prefix="/content", tags=["content"])
router.include_router(upload.router, prefix="/upload", tags=["upload"])

"""Pydantic request/response schemas."""

from app.schemas.auth import LoginRequest, LoginResponse, TokenClaims, UserSummary
from app.schemas.content import ContentUpdateResponse
from app.schemas.error import ErrorResponse
from app.schemas.health import HealthResponse
from app.schemas.upload import UploadResponse

__all__ = [
    "ContentUpdateResponse",
    "ErrorResponse",
    "HealthResponse",
    "LoginRequest",
    "LoginResponse",
    "TokenClaims",
    "UploadResponse",
    "UserSummary",
]

"""Request dependencies: the stores built by create_app and the bearer-token guard."""

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.core.config import Settings
from app.schemas.auth import TokenClaims
from app.services.auth import AuthService, InvalidTokenError
from app.services.content_store import ContentStore
from app.services.upload_store import UploadStore

security = HTTPBearer(auto_error=False)


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_content_store(request: Request) -> ContentStore:
    return request.app.state.content_store


def get_upload_store(request: Request) -> UploadStore:
    return request.app.state.upload_store


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    auth: Annotated[AuthService, Depends(get_auth_service)],
) -> TokenClaims:
    """
    Dependency: require a valid Bearer JWT and return its claims.
    Raises 401 when the token is missing and 403 when it is invalid or expired.
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Access token required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        return auth.verify(credentials.credentials)
    except InvalidTokenError as e:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=e.message,
        ) from e

"""JWT login and current-user endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from app.api.deps import get_auth_service, get_current_user
from app.schemas.auth import LoginRequest, LoginResponse, TokenClaims
from app.services.auth import AuthService, InvalidCredentialsError

router = APIRouter()


@router.post("/login", response_model=LoginResponse)
def login(
    body: LoginRequest,
    auth: Annotated[AuthService, Depends(get_auth_service)],
) -> LoginResponse:
    """
    Authenticate with username and password; returns a JWT and the account summary.
    Include the token in the Authorization header as: Bearer <token>
    """
    try:
        return auth.login(body.username, body.password)
    except InvalidCredentialsError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.message,
        ) from e


@router.get("/me", response_model=TokenClaims)
def me(
    current_user: Annotated[TokenClaims, Depends(get_current_user)],
) -> TokenClaims:
    """Return the identity carried by the presented token."""
    return current_user

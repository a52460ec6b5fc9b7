"""Request/response schemas for auth endpoints."""

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    """Credentials for login."""

    username: str = Field(..., min_length=1, max_length=255, description="Username")
    password: str = Field(..., min_length=1, description="Password")


class UserSummary(BaseModel):
    """Public view of an account (no password hash)."""

    id: int
    username: str
    email: str
    role: str


class LoginResponse(BaseModel):
    """JWT returned after successful login, with the account it belongs to."""

    token: str = Field(..., description="JWT access token; send as 'Authorization: Bearer <token>'")
    user: UserSummary


class TokenClaims(BaseModel):
    """Verified identity carried by a bearer token."""

    id: int
    username: str
    role: str

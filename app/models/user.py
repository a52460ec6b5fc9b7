"""Persisted user account record (one entry of users.json)."""

from pydantic import BaseModel, Field


class UserRecord(BaseModel):
    """
    User account for JWT authentication.

    password holds a bcrypt hash, never the plain text. role: 'admin'
    """

    id: int
    username: str = Field(..., min_length=1, max_length=255)
    email: str = ""
    password: str
    role: str = "admin"

"""Login against the credential store and stateless bearer-token verification."""

import logging
from typing import TYPE_CHECKING

import jwt

from app.core.security import create_access_token, decode_access_token, verify_password
from app.schemas.auth import LoginResponse, TokenClaims, UserSummary
from app.services.credential_store import CredentialStore
from app.services.errors import CMSError

if TYPE_CHECKING:
    from app.core.config import Settings

logger = logging.getLogger(__name__)


class InvalidCredentialsError(CMSError):
    """Raised for an unknown username or a wrong password (deliberately indistinguishable)."""

    def __init__(self) -> None:
        super().__init__("Invalid credentials")


class InvalidTokenError(CMSError):
    """Raised for a malformed, expired or badly signed token."""

    def __init__(self) -> None:
        super().__init__("Invalid or expired token")


class AuthService:
    def __init__(self, credentials: CredentialStore, settings: "Settings") -> None:
        self.credentials = credentials
        self.settings = settings

    def login(self, username: str, password: str) -> LoginResponse:
        """
        Check the password against the stored bcrypt hash and issue a token.
        Raises InvalidCredentialsError with the same message whether the user exists or not.
        """
        user = self.credentials.find_by_username(username)
        if user is None or not verify_password(password, user.password):
            logger.warning("Login failed", extra={"username": username[:255]})
            raise InvalidCredentialsError()

        token = create_access_token(
            self.settings,
            user_id=user.id,
            username=user.username,
            role=user.role,
        )
        logger.info("Login succeeded", extra={"username": user.username})
        return LoginResponse(
            token=token,
            user=UserSummary(
                id=user.id, username=user.username, email=user.email, role=user.role
            ),
        )

    def verify(self, token: str) -> TokenClaims:
        """Return the claims of a valid token. Raises InvalidTokenError on any failure."""
        try:
            payload = decode_access_token(self.settings, token)
        except jwt.PyJWTError as e:
            raise InvalidTokenError() from e
        try:
            return TokenClaims(
                id=int(payload["sub"]),
                username=payload["username"],
                role=payload["role"],
            )
        except (KeyError, TypeError, ValueError) as e:
            raise InvalidTokenError() from e

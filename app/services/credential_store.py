"""User accounts persisted as a JSON array in <data_dir>/users.json."""

import logging
import threading
from pathlib import Path

from pydantic import ValidationError

from app.core.security import hash_password
from app.models.user import UserRecord
from app.services.errors import CMSError
from app.services.json_file import read_json, write_json

logger = logging.getLogger(__name__)

USERS_FILENAME = "users.json"


class DuplicateUserError(CMSError):
    """Raised when adding an account whose username is already taken."""


class CredentialStore:
    """Durable record of user accounts. Reads hit disk on every call."""

    def __init__(self, data_dir: Path) -> None:
        self.path = Path(data_dir) / USERS_FILENAME
        self._lock = threading.Lock()

    def initialize(self, username: str, password: str, email: str = "") -> bool:
        """
        Create the users file with one admin account if it does not exist.

        Idempotent: returns False and leaves the file untouched when it exists.
        """
        with self._lock:
            if self.path.exists():
                return False
            admin = UserRecord(
                id=1,
                username=username,
                email=email,
                password=hash_password(password),
                role="admin",
            )
            write_json(self.path, [admin.model_dump()])
        logger.info("Default admin user created: username=%s", username)
        return True

    def list_users(self) -> list[UserRecord]:
        """All accounts; an unreadable or missing file reads as no accounts."""
        try:
            raw = read_json(self.path)
        except FileNotFoundError:
            return []
        except (OSError, ValueError) as e:
            logger.error("Error reading users file %s: %s", self.path, e)
            return []
        if not isinstance(raw, list):
            logger.error("Users file %s is not a JSON array", self.path)
            return []
        users: list[UserRecord] = []
        for i, item in enumerate(raw):
            try:
                users.append(UserRecord.model_validate(item))
            except ValidationError:
                logger.warning("Skipping malformed user record at index %s", i)
        return users

    def find_by_username(self, username: str) -> UserRecord | None:
        for user in self.list_users():
            if user.username == username:
                return user
        return None

    def add_user(
        self,
        username: str,
        password: str,
        email: str = "",
        role: str = "admin",
    ) -> UserRecord:
        """Append an account with the next free id. Raises DuplicateUserError."""
        with self._lock:
            users = self.list_users()
            if any(u.username == username for u in users):
                raise DuplicateUserError(f"User '{username}' already exists.")
            user = UserRecord(
                id=max((u.id for u in users), default=0) + 1,
                username=username,
                email=email,
                password=hash_password(password),
                role=role,
            )
            write_json(self.path, [u.model_dump() for u in users] + [user.model_dump()])
        logger.info("User created: username=%s role=%s", username, role)
        return user

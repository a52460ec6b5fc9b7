"""Records persisted by the file-backed stores."""

from app.models.upload import StoredFile
from app.models.user import UserRecord

__all__ = ["StoredFile", "UserRecord"]

"""Uploaded images and documents: validation and streamed persistence under a public directory."""

import logging
import os
import secrets
import time
from pathlib import Path, PurePath
from typing import Protocol

from app.models.upload import StoredFile
from app.services.errors import CMSError

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = frozenset({".jpeg", ".jpg", ".png", ".gif", ".pdf", ".doc", ".docx"})
ALLOWED_CONTENT_TYPES = frozenset(
    {
        "image/jpeg",
        "image/jpg",
        "image/pjpeg",
        "image/png",
        "image/gif",
        "application/pdf",
        "application/msword",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    }
)
DEFAULT_MAX_UPLOAD_BYTES = 10 * 1024 * 1024  # 10 MB
CHUNK_SIZE = 1024 * 1024
FILENAME_PREFIX = "file"
MAX_NAME_ATTEMPTS = 5


class UploadValidationError(CMSError):
    """Raised when an upload is missing or its extension/content type is not allowed."""


class UploadTooLargeError(CMSError):
    """Raised when an upload exceeds the size ceiling."""

    def __init__(self, max_bytes: int) -> None:
        self.max_bytes = max_bytes
        super().__init__(f"File size must not exceed {max_bytes // (1024 * 1024)} MB.")


class UploadStoreError(CMSError):
    """Raised when an accepted upload cannot be written to disk."""


class AsyncReadable(Protocol):
    """What save() needs from an uploaded file (matches fastapi.UploadFile)."""

    filename: str | None
    size: int | None

    @property
    def content_type(self) -> str | None: ...

    async def read(self, size: int = -1) -> bytes: ...


def file_extension(filename: str) -> str:
    return PurePath(filename).suffix.lower()


def normalize_content_type(content_type: str | None) -> str:
    return (content_type or "").split(";")[0].strip().lower()


class UploadStore:
    """Owns the bytes under upload_dir; files are exposed at url_prefix/<filename>."""

    def __init__(
        self,
        upload_dir: Path,
        url_prefix: str = "/uploads",
        max_bytes: int = DEFAULT_MAX_UPLOAD_BYTES,
    ) -> None:
        self.upload_dir = Path(upload_dir)
        self.url_prefix = url_prefix.rstrip("/")
        self.max_bytes = max_bytes

    def validate(self, filename: str | None, content_type: str | None) -> None:
        """Both the extension and the declared content type must be allow-listed."""
        if not filename:
            raise UploadValidationError("No file uploaded")
        ext_ok = file_extension(filename) in ALLOWED_EXTENSIONS
        type_ok = normalize_content_type(content_type) in ALLOWED_CONTENT_TYPES
        if not (ext_ok and type_ok):
            raise UploadValidationError("Only images and documents are allowed")

    def generate_filename(self, original_name: str) -> str:
        """file-<epoch ms>-<random><ext>; unique enough that collisions only trigger a retry."""
        millis = int(time.time() * 1000)
        suffix = secrets.randbelow(10**9)
        return f"{FILENAME_PREFIX}-{millis}-{suffix}{file_extension(original_name)}"

    def path_for(self, filename: str) -> Path:
        return self.upload_dir / filename

    def url_for(self, filename: str) -> str:
        return f"{self.url_prefix}/{filename}"

    def _open_new_file(self, original_name: str) -> tuple[Path, int]:
        """Create a fresh file with O_EXCL so an existing upload is never overwritten."""
        self.upload_dir.mkdir(parents=True, exist_ok=True)
        for _ in range(MAX_NAME_ATTEMPTS):
            path = self.path_for(self.generate_filename(original_name))
            try:
                fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o644)
            except FileExistsError:
                continue
            return path, fd
        raise UploadStoreError("Upload failed")

    async def save(self, upload: AsyncReadable) -> StoredFile:
        """
        Validate and stream an upload to disk.

        Raises UploadValidationError, UploadTooLargeError or UploadStoreError;
        on any failure no partial file is left behind.
        """
        original_name = upload.filename or ""
        content_type = normalize_content_type(upload.content_type)
        self.validate(original_name, content_type)
        if upload.size is not None and upload.size > self.max_bytes:
            raise UploadTooLargeError(self.max_bytes)

        try:
            path, fd = self._open_new_file(original_name)
        except OSError as e:
            logger.error("Could not create upload file in %s: %s", self.upload_dir, e)
            raise UploadStoreError("Upload failed") from e

        written = 0
        try:
            with os.fdopen(fd, "wb") as out:
                while True:
                    chunk = await upload.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    written += len(chunk)
                    if written > self.max_bytes:
                        raise UploadTooLargeError(self.max_bytes)
                    out.write(chunk)
        except UploadTooLargeError:
            path.unlink(missing_ok=True)
            raise
        except OSError as e:
            path.unlink(missing_ok=True)
            logger.error("Error writing upload %s: %s", path.name, e)
            raise UploadStoreError("Upload failed") from e
        except BaseException:
            path.unlink(missing_ok=True)
            raise

        stored = StoredFile(
            filename=path.name,
            original_name=original_name,
            content_type=content_type,
            size=written,
            url=self.url_for(path.name),
        )
        logger.info(
            "Upload stored",
            extra={"stored_filename": stored.filename, "size": stored.size},
        )
        return stored

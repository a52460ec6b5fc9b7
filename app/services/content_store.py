"""Site content: one JSON document in <data_dir>/content.json, keyed by section name."""

import logging
import threading
from pathlib import Path
from typing import Any

from app.services.errors import CMSError
from app.services.json_file import read_json, write_json

logger = logging.getLogger(__name__)

CONTENT_FILENAME = "content.json"


class SectionNotFoundError(CMSError):
    """Raised when a section name is not a key of the content document."""

    def __init__(self, section: str) -> None:
        self.section = section
        super().__init__("Section not found")


class ContentStoreError(CMSError):
    """Raised when the content document cannot be persisted."""


class ContentStore:
    """
    Read/write access to the content document.

    Section values are untyped JSON; each editor owns the shape of its section.
    All writes go through a single lock held for the whole read-modify-write,
    so updates to different sections never overwrite each other.
    """

    def __init__(self, data_dir: Path) -> None:
        self.path = Path(data_dir) / CONTENT_FILENAME
        self._write_lock = threading.Lock()

    def initialize(self, default: dict[str, Any]) -> bool:
        """Write the default document if no content file exists. Returns True if written."""
        with self._write_lock:
            if self.path.exists():
                return False
            write_json(self.path, default)
        logger.info("Default content document created at %s", self.path)
        return True

    def _load(self) -> dict[str, Any]:
        raw = read_json(self.path)
        if not isinstance(raw, dict):
            raise ValueError("content document is not a JSON object")
        return raw

    def read_all(self) -> dict[str, Any]:
        """
        Return the full document.

        A missing or unparseable file degrades to an empty document (logged)
        so public reads stay available.
        """
        try:
            return self._load()
        except (OSError, ValueError) as e:
            logger.error("Error reading content from %s: %s", self.path, e)
            return {}

    def read_section(self, section: str) -> Any:
        """Return the value stored under section. Raises SectionNotFoundError."""
        content = self.read_all()
        if section not in content:
            raise SectionNotFoundError(section)
        return content[section]

    def write_section(self, section: str, value: Any) -> Any:
        """
        Replace the whole value of section and persist before returning.

        Raises ContentStoreError when the write fails, or when an existing
        document is unreadable (it is never replaced by a partial document).
        """
        with self._write_lock:
            try:
                content = self._load()
            except FileNotFoundError:
                content = {}
            except (OSError, ValueError) as e:
                logger.error("Refusing to overwrite unreadable content %s: %s", self.path, e)
                raise ContentStoreError("Failed to save content") from e

            content[section] = value
            try:
                write_json(self.path, content)
            except (OSError, TypeError, ValueError) as e:
                logger.error("Error saving content section=%s: %s", section, e)
                raise ContentStoreError("Failed to save content") from e
        logger.info("Content section updated", extra={"section": section})
        return value

    def is_readable(self) -> bool:
        try:
            self._load()
        except (OSError, ValueError):
            return False
        return True

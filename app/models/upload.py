"""Metadata of a file accepted by the upload store."""

from pydantic import BaseModel


class StoredFile(BaseModel):
    filename: str
    original_name: str
    content_type: str
    size: int
    url: str

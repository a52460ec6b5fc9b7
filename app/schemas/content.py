"""Response schemas for the content endpoints."""

from typing import Any

from pydantic import BaseModel, Field


class ContentUpdateResponse(BaseModel):
    """Response after replacing a section."""

    message: str = Field(default="Content updated successfully")
    data: Any = Field(default=None, description="The stored section value.")

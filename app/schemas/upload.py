"""Request/response schemas for the upload endpoint."""

from pydantic import BaseModel, ConfigDict, Field


class UploadResponse(BaseModel):
    """Response after successfully storing an uploaded file."""

    model_config = ConfigDict(populate_by_name=True)

    message: str = Field(default="File uploaded successfully")
    filename: str = Field(..., description="Generated name the file is stored under.")
    original_name: str = Field(
        ...,
        alias="originalName",
        description="Filename as sent by the client.",
    )
    url: str = Field(..., description="Public path the file is served from.")
    size: int = Field(..., ge=0, description="Size in bytes.")

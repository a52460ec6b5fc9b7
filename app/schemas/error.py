"""Error body returned by every failing endpoint."""

from typing import Any

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    error: str
    details: Any = None

"""Base exception for service-layer failures converted to HTTP errors by the API."""


class CMSError(Exception):
    """Raised by the stores and services; carries a short user-facing message."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

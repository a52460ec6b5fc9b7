"""Core app configuration, logging and security primitives."""

from app.core.config import Settings, get_settings
from app.core.logging_config import configure_logging

__all__ = ["Settings", "get_settings", "configure_logging"]

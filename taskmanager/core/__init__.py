"""Core app configuration, database and security primitives."""

from taskmanager.core.config import get_settings, settings
from taskmanager.core.database import get_db

__all__ = ["get_settings", "settings", "get_db"]

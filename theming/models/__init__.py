"""Database models."""
from theming.models.base import Base, drop_db, init_db
from theming.models.app_config import AppConfigValue
from theming.models.user import User  # noqa: F401 - for metadata

__all__ = [
    "Base",
    "AppConfigValue",
    "User",
    "drop_db",
    "init_db",
]

"""App package init."""

from app.core.config import Settings, settings
from app.core.database import Base, SessionLocal, engine, get_db

__all__ = [
    "settings",
    "Settings",
    "Base",
    "SessionLocal",
    "engine",
    "get_db",
]

"""
Database infrastructure for the marketplace.
"""

from .database import engine, SessionLocal, get_db, Base
from . import models

__all__ = [
    "engine",
    "SessionLocal",
    "get_db",
    "Base",
    "models",
]

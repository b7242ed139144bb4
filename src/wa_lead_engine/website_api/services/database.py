"""Database access for API routes."""

from pathlib import Path

from ...storage.database import LeadDatabase
from ..config import settings

_db = None


def get_database() -> LeadDatabase:
    """Get the shared database, reopening it if the configured path changed."""
    global _db
    if _db is None or str(_db.db_path) != str(Path(settings.db_path)):
        _db = LeadDatabase(
            Path(settings.db_path),
            min_password_length=settings.min_password_length,
        )
    return _db

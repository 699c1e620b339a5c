"""Storage layer for source records."""

from science_sources.storage.database import Database

__all__ = ["Database"]

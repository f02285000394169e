"""I/O layer - SQLite persistence for vocabulary and statistics."""

from .database_manager import DatabaseManager

__all__ = ["DatabaseManager"]

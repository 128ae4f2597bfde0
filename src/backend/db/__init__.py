"""Database module."""

from db.session import Database, get_db

__all__ = ["Database", "get_db"]

"""Storage layers - SQLite and JSON item stores."""

from .repository import ItemRepository, open_repository
from .database import SQLiteItemRepository
from .json_store import JSONItemRepository

__all__ = ["ItemRepository", "open_repository", "SQLiteItemRepository", "JSONItemRepository"]

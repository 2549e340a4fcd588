"""Item store contract shared by the SQLite and JSON backends."""

import logging
from abc import ABC, abstractmethod
from typing import Optional

from ..core.models import Category, Item


class ItemRepository(ABC):
    """Persists items and the categories they belong to.

    Implementations raise ``ItemNotFound`` from ``select`` and wrap every
    backend failure in ``StorageError``.
    """

    @abstractmethod
    def insert(self, item: Item) -> Item:
        """Persist ``item``, creating its category if needed.

        Returns a copy of the item with its assigned identifier.
        """

    @abstractmethod
    def list_all(self) -> list[Item]:
        """Return every item, ordered by identifier."""

    @abstractmethod
    def select(self, item_id: int) -> Item:
        """Return the item with the given identifier."""

    @abstractmethod
    def search(self, keyword: str) -> list[Item]:
        """Return items whose name or category contains ``keyword`` (case-sensitive)."""

    @abstractmethod
    def count(self) -> int:
        """Return the number of stored items."""

    @abstractmethod
    def list_categories(self) -> list[Category]:
        """Return every known category."""


def open_repository(settings, logger: Optional[logging.Logger] = None) -> ItemRepository:
    """Create the item store selected by ``settings.backend``."""
    if settings.backend == "json":
        from .json_store import JSONItemRepository

        return JSONItemRepository(settings.items_file, logger=logger)

    from .database import SQLiteItemRepository

    return SQLiteItemRepository(settings.database_path, logger=logger)

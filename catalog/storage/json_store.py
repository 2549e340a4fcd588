"""Flat-file item store kept as a single JSON document.

This is the legacy/offline backend. The whole file is read and rewritten on
every insert; an in-process lock serializes writers within one process, but
several processes writing the same file can still lose updates. Prefer
``SQLiteItemRepository`` for the service.

File format::

    {"items": [{"id": 1, "name": "...", "category": "...", "image": "..."}]}
"""

import json
import logging
import os
import tempfile
import threading
from dataclasses import replace
from pathlib import Path
from typing import Optional

from ..core.models import Category, Item
from ..errors import ItemNotFound, StorageError
from ..log import get_logger
from .repository import ItemRepository


class JSONItemRepository(ItemRepository):
    """Stores items as an ordered list in one JSON file."""

    def __init__(self, file_path: str | Path = "data/items.json", logger: Optional[logging.Logger] = None):
        self.file_path = Path(file_path)
        self.logger = get_logger(__name__, logger)
        self._lock = threading.Lock()
        try:
            self.file_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"failed to create items directory: {e}") from e

    def _load(self) -> list[Item]:
        """Read every record from disk. A missing file is an empty store."""
        try:
            with open(self.file_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return []
        except json.JSONDecodeError as e:
            raise StorageError(f"malformed items file {self.file_path}: {e}") from e
        except OSError as e:
            raise StorageError(f"failed to read items file {self.file_path}: {e}") from e

        records = data.get("items") if isinstance(data, dict) else None
        if not isinstance(records, list):
            raise StorageError(f"items file {self.file_path} has no 'items' list")

        items = []
        try:
            for position, record in enumerate(records, start=1):
                item = Item.from_dict(record)
                # legacy files carry no id; fall back to the 1-based position
                if item.id is None:
                    item.id = position
                if not all(isinstance(v, str) for v in (item.name, item.category, item.image_name)):
                    raise TypeError(f"record {position} has a non-string field")
                items.append(item)
        except (KeyError, TypeError, AttributeError) as e:
            raise StorageError(f"malformed item record in {self.file_path}: {e}") from e
        return items

    def _save(self, items: list[Item]) -> None:
        """Atomically replace the file with ``items``."""
        payload = {"items": [item.to_record() for item in items]}
        tmp_name = None
        try:
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self.file_path.parent,
                prefix=".items-",
                suffix=".tmp",
                delete=False,
            ) as tmp:
                tmp_name = tmp.name
                json.dump(payload, tmp, ensure_ascii=False, indent=4)
            os.replace(tmp_name, self.file_path)
        except OSError as e:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise StorageError(f"failed to write items file {self.file_path}: {e}") from e

    def insert(self, item: Item) -> Item:
        with self._lock:
            items = self._load()
            next_id = max((i.id for i in items), default=0) + 1
            stored = replace(item, id=next_id, image_name=item.image_name or "")
            items.append(stored)
            self._save(items)
        self.logger.debug("inserted item %d (%s)", stored.id, stored.name)
        return stored

    def list_all(self) -> list[Item]:
        return self._load()

    def select(self, item_id: int) -> Item:
        if item_id <= 0:
            raise ItemNotFound(f"item not found: {item_id}")

        items = self._load()
        if item_id > len(items):
            raise ItemNotFound(f"item not found: {item_id}")
        for item in items:
            if item.id == item_id:
                return item
        raise ItemNotFound(f"item not found: {item_id}")

    def search(self, keyword: str) -> list[Item]:
        return [
            item for item in self._load()
            if keyword in item.name or keyword in item.category
        ]

    def count(self) -> int:
        return len(self._load())

    def list_categories(self) -> list[Category]:
        """Distinct category names in first-seen order, numbered from 1."""
        names: dict[str, None] = {}
        for item in self._load():
            names.setdefault(item.category, None)
        return [Category(id=i, name=name) for i, name in enumerate(names, start=1)]

"""SQLite item store with a separate categories table."""

import logging
import sqlite3
from contextlib import contextmanager
from dataclasses import replace
from pathlib import Path
from typing import Iterator, Optional

from ..core.models import Category, Item
from ..errors import ItemNotFound, StorageError
from ..log import get_logger
from .repository import ItemRepository

SCHEMA = """
CREATE TABLE IF NOT EXISTS categories (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL UNIQUE
);
CREATE TABLE IF NOT EXISTS items (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    category_id INTEGER NOT NULL REFERENCES categories (id),
    image_name TEXT NOT NULL DEFAULT ''
);
"""

ITEM_COLUMNS = """
    SELECT items.id, items.name, categories.name AS category_name, items.image_name
    FROM items
    JOIN categories ON items.category_id = categories.id
"""


def _glob_escape(keyword: str) -> str:
    """Escape GLOB wildcards so the keyword matches literally."""
    special = {"*": "[*]", "?": "[?]", "[": "[[]"}
    return "".join(special.get(ch, ch) for ch in keyword)


class SQLiteItemRepository(ItemRepository):
    """Manages items and categories in SQLite.

    A new connection is opened per call, so one instance can be shared by
    concurrent request handlers; row visibility is left to SQLite's locking.
    """

    def __init__(
        self,
        db_path: str | Path = "data/catalog.db",
        timeout: float = 5.0,
        logger: Optional[logging.Logger] = None,
    ):
        self.db_path = Path(db_path)
        self.timeout = timeout
        self.logger = get_logger(__name__, logger)
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"failed to create database directory: {e}") from e
        self._init_db()

    @contextmanager
    def _connect(self, action: str, write: bool = False) -> Iterator[sqlite3.Connection]:
        """Open a connection for one operation.

        With ``write`` the body runs inside ``BEGIN IMMEDIATE``, so the write
        lock is held from the first read; it is committed on success and
        rolled back on any exception. Any sqlite3 error is re-raised as
        StorageError naming ``action``.
        """
        try:
            conn = sqlite3.connect(self.db_path, timeout=self.timeout, isolation_level=None)
        except sqlite3.Error as e:
            raise StorageError(f"failed to open database {self.db_path}: {e}") from e
        try:
            conn.execute("PRAGMA foreign_keys = ON")
            if write:
                conn.execute("BEGIN IMMEDIATE")
            try:
                yield conn
            except BaseException:
                if conn.in_transaction:
                    conn.rollback()
                raise
            if conn.in_transaction:
                conn.commit()
        except sqlite3.Error as e:
            raise StorageError(f"failed to {action}: {e}") from e
        finally:
            conn.close()

    def _init_db(self):
        """Create the tables if they don't exist."""
        with self._connect("initialize schema") as conn:
            conn.executescript(SCHEMA)

    def _row_to_item(self, row) -> Item:
        return Item(id=row[0], name=row[1], category=row[2], image_name=row[3] or "")

    def _resolve_category(self, conn: sqlite3.Connection, name: str) -> int:
        """Return the id of category ``name``, inserting it when absent."""
        query = "SELECT id FROM categories WHERE name = ?"
        row = conn.execute(query, (name,)).fetchone()
        if row:
            return row[0]

        try:
            cursor = conn.execute("INSERT INTO categories (name) VALUES (?)", (name,))
        except sqlite3.IntegrityError:
            # another writer created it between our read and insert
            row = conn.execute(query, (name,)).fetchone()
            if row is None:
                raise
            return row[0]

        self.logger.info("created category %r", name)
        return cursor.lastrowid

    def insert(self, item: Item) -> Item:
        with self._connect("insert item", write=True) as conn:
            category_id = self._resolve_category(conn, item.category)
            cursor = conn.execute(
                "INSERT INTO items (name, category_id, image_name) VALUES (?, ?, ?)",
                (item.name, category_id, item.image_name or ""),
            )
            item_id = cursor.lastrowid
        self.logger.debug("inserted item %d (%s)", item_id, item.name)
        return replace(item, id=item_id)

    def list_all(self) -> list[Item]:
        with self._connect("query items") as conn:
            cursor = conn.execute(ITEM_COLUMNS + " ORDER BY items.id")
            return [self._row_to_item(row) for row in cursor.fetchall()]

    def select(self, item_id: int) -> Item:
        if item_id <= 0:
            raise ItemNotFound(f"item not found: {item_id}")

        with self._connect("select item") as conn:
            row = conn.execute(ITEM_COLUMNS + " WHERE items.id = ?", (item_id,)).fetchone()
        if row is None:
            raise ItemNotFound(f"item not found: {item_id}")
        return self._row_to_item(row)

    def search(self, keyword: str) -> list[Item]:
        pattern = f"*{_glob_escape(keyword)}*"
        with self._connect("search items") as conn:
            cursor = conn.execute(
                ITEM_COLUMNS
                + " WHERE items.name GLOB ? OR categories.name GLOB ? ORDER BY items.id",
                (pattern, pattern),
            )
            return [self._row_to_item(row) for row in cursor.fetchall()]

    def count(self) -> int:
        with self._connect("count items") as conn:
            return conn.execute("SELECT COUNT(*) FROM items").fetchone()[0]

    def list_categories(self) -> list[Category]:
        with self._connect("query categories") as conn:
            cursor = conn.execute("SELECT id, name FROM categories ORDER BY id")
            return [Category(id=row[0], name=row[1]) for row in cursor.fetchall()]

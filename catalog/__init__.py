"""Catalog - item records with content-addressed photo storage.

Package structure:
    catalog/
    ├── cli.py              # Command-line interface
    ├── config.py           # Settings from defaults, YAML and environment
    ├── errors.py           # Exception types
    ├── log.py              # Logging setup
    ├── core/               # Core business logic
    │   ├── models.py       # Data models (Item, Category, StoredImage)
    │   └── image_store.py  # Content-addressable image storage
    ├── storage/            # Item persistence
    │   ├── repository.py   # ItemRepository contract
    │   ├── database.py     # SQLite backend
    │   └── json_store.py   # Flat JSON file backend
    ├── api/                # External integrations
    │   └── catalog_api.py  # HTTP client for the catalog service
    └── server/             # FastAPI handler layer
"""

from .config import Settings, load_settings
from .core.models import Category, Item, StoredImage
from .core.image_store import ImageStore
from .errors import (
    CatalogError,
    ConfigError,
    ImageNotFound,
    InvalidImageName,
    InvalidInput,
    ItemNotFound,
    StorageError,
)
from .storage.repository import ItemRepository, open_repository
from .storage.database import SQLiteItemRepository
from .storage.json_store import JSONItemRepository
from .api.catalog_api import CatalogAPI, CatalogAPIError

__all__ = [
    # Config
    "Settings",
    "load_settings",
    # Core
    "Category",
    "Item",
    "StoredImage",
    "ImageStore",
    # Errors
    "CatalogError",
    "ConfigError",
    "ImageNotFound",
    "InvalidImageName",
    "InvalidInput",
    "ItemNotFound",
    "StorageError",
    # Storage
    "ItemRepository",
    "open_repository",
    "SQLiteItemRepository",
    "JSONItemRepository",
    # API
    "CatalogAPI",
    "CatalogAPIError",
]

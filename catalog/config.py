"""Settings for the catalog service and CLI.

Values are resolved in three layers, later layers winning:

1. built-in defaults,
2. an optional YAML file (``config_path`` or the ``CATALOG_CONFIG`` variable),
3. environment variables, after ``.env`` has been loaded.

Environment variables:
    CATALOG_IMAGE_DIR: Directory holding image blobs (default: images)
    CATALOG_BACKEND: Item store backend, "sqlite" or "json" (default: sqlite)
    CATALOG_DB_PATH: SQLite database path (default: data/catalog.db)
    CATALOG_ITEMS_FILE: JSON items file for the json backend (default: data/items.json)
    CATALOG_HOST / PORT: Server bind address (default: 127.0.0.1:9000)
    FRONT_URL: Origin allowed by CORS (default: http://localhost:3000)
    LOG_LEVEL: Logging level (default: INFO)
    CATALOG_API_URL: Base URL of a running service; makes the CLI remote
"""

import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional

import yaml
from dotenv import load_dotenv

from .errors import ConfigError

BACKENDS = ("sqlite", "json")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

ENV_VARS = {
    "image_dir": "CATALOG_IMAGE_DIR",
    "backend": "CATALOG_BACKEND",
    "database_path": "CATALOG_DB_PATH",
    "items_file": "CATALOG_ITEMS_FILE",
    "front_url": "FRONT_URL",
    "host": "CATALOG_HOST",
    "port": "PORT",
    "log_level": "LOG_LEVEL",
    "api_url": "CATALOG_API_URL",
}


@dataclass
class Settings:
    """Resolved configuration."""

    image_dir: Path = Path("images")
    backend: str = "sqlite"
    database_path: Path = Path("data/catalog.db")
    items_file: Path = Path("data/items.json")
    front_url: str = "http://localhost:3000"
    host: str = "127.0.0.1"
    port: int = 9000
    log_level: str = "INFO"
    api_url: Optional[str] = None

    def __post_init__(self):
        self.image_dir = Path(self.image_dir)
        self.database_path = Path(self.database_path)
        self.items_file = Path(self.items_file)
        self.backend = str(self.backend).lower()
        self.log_level = str(self.log_level).upper()
        try:
            self.port = int(self.port)
        except (TypeError, ValueError):
            raise ConfigError(f"port must be an integer, got {self.port!r}") from None

        if self.backend not in BACKENDS:
            raise ConfigError(
                f"backend must be one of {', '.join(BACKENDS)}, got {self.backend!r}"
            )
        if self.log_level not in LOG_LEVELS:
            raise ConfigError(f"unknown log level: {self.log_level!r}")
        if not 0 < self.port < 65536:
            raise ConfigError(f"port out of range: {self.port}")


def load_yaml_config(config_path: str | Path) -> dict:
    """Load settings overrides from a YAML file."""
    path = Path(config_path)
    if not path.exists():
        raise ConfigError(f"Config file not found: {config_path}")

    try:
        with open(path) as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e

    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ConfigError(f"Config file must contain a mapping: {config_path}")

    known = {f.name for f in fields(Settings)}
    unknown = set(config) - known
    if unknown:
        raise ConfigError(f"Unknown config keys: {', '.join(sorted(unknown))}")
    return config


def load_settings(config_path: Optional[str | Path] = None) -> Settings:
    """Build settings from defaults, an optional YAML file and the environment."""
    load_dotenv()

    values: dict = {}
    config_path = config_path or os.environ.get("CATALOG_CONFIG")
    if config_path:
        values.update(load_yaml_config(config_path))

    for field_name, env_var in ENV_VARS.items():
        value = os.environ.get(env_var)
        if value:
            values[field_name] = value

    return Settings(**values)

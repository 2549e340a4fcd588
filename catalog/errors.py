"""Exception types shared by the item store, image store and handlers."""


class CatalogError(Exception):
    """Base class for all catalog errors."""
    pass


class ItemNotFound(CatalogError):
    """Raised when no item matches the requested identifier."""
    pass


class ImageNotFound(CatalogError):
    """Raised when a requested image name is valid but no blob exists for it."""

    def __init__(self, path):
        super().__init__(f"image not found: {path}")
        self.path = path


class InvalidInput(CatalogError):
    """Raised for malformed caller-supplied values."""
    pass


class InvalidImageName(InvalidInput):
    """Raised when a requested image name is unsafe or not a JPEG name."""
    pass


class StorageError(CatalogError):
    """Raised when the backing database or filesystem fails."""
    pass


class ConfigError(CatalogError):
    """Raised when settings cannot be loaded or are invalid."""
    pass

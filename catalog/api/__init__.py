"""External API integrations - catalog service client."""

from .catalog_api import CatalogAPI, CatalogAPIError

__all__ = ["CatalogAPI", "CatalogAPIError"]

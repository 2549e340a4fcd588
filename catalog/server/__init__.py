"""HTTP layer - FastAPI application for the catalog service."""

from .app import create_app

__all__ = ["create_app"]

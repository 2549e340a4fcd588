"""Core business logic - data models and image storage."""

from .models import Category, Item, StoredImage
from .image_store import ImageStore

__all__ = ["Category", "Item", "StoredImage", "ImageStore"]

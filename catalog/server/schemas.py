"""Pydantic schemas for API responses."""
from pydantic import BaseModel


class MessageResponse(BaseModel):
    message: str


class ItemResponse(BaseModel):
    """External item representation; the identifier is not exposed."""
    name: str
    category: str
    image: str = ""


class ItemListResponse(BaseModel):
    """Response for /items and /search."""
    items: list[ItemResponse]

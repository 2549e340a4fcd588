import io

import pytest
from PIL import Image

from catalog.core.image_store import ImageStore
from catalog.storage.database import SQLiteItemRepository
from catalog.storage.json_store import JSONItemRepository


@pytest.fixture
def image_store(tmp_path):
    return ImageStore(tmp_path / "images")


@pytest.fixture
def sqlite_repo(tmp_path):
    return SQLiteItemRepository(tmp_path / "catalog.db")


@pytest.fixture
def json_repo(tmp_path):
    return JSONItemRepository(tmp_path / "items.json")


@pytest.fixture(params=["sqlite", "json"])
def repo(request, tmp_path):
    if request.param == "sqlite":
        return SQLiteItemRepository(tmp_path / "catalog.db")
    return JSONItemRepository(tmp_path / "items.json")


def _jpeg_bytes(size=(8, 6), color=(255, 0, 0)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", size, color=color).save(buffer, format="JPEG")
    return buffer.getvalue()


@pytest.fixture
def make_jpeg():
    return _jpeg_bytes

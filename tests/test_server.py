import hashlib
import logging
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from catalog.config import Settings
from catalog.errors import StorageError
from catalog.server.app import create_app
from catalog.storage.repository import ItemRepository

FRONT_URL = "http://localhost:3000"


@pytest.fixture
def settings(tmp_path):
    return Settings(
        image_dir=tmp_path / "images",
        database_path=tmp_path / "catalog.db",
        front_url=FRONT_URL,
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    return TestClient(app)


def _post_item(client, name="shoes", category="fashion", image=b"\x01\x02\x03"):
    return client.post(
        "/items",
        data={"name": name, "category": category},
        files={"image": ("photo.jpg", image, "image/jpeg")},
    )


def test_hello(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json() == {"message": "Hello, world!"}


def test_add_list_select_and_fetch_image(client, app):
    image = bytes([0x01, 0x02, 0x03])
    expected_name = hashlib.sha256(image).hexdigest() + ".jpg"

    response = _post_item(client, image=image)
    assert response.status_code == 200
    assert response.json() == {"message": "item received: shoes"}

    expected = {"name": "shoes", "category": "fashion", "image": expected_name}
    assert client.get("/items").json() == {"items": [expected]}
    assert client.get("/items/1").json() == expected

    image_response = client.get(f"/images/{expected_name}")
    assert image_response.status_code == 200
    assert image_response.headers["content-type"] == "image/jpeg"
    assert image_response.content == image


def test_missing_image_falls_back_to_default(client, app):
    default_bytes = app.state.image_store.default_path.read_bytes()

    response = client.get("/images/nonexistent.jpg")
    assert response.status_code == 200
    assert response.content == default_bytes


def test_default_image_removed_returns_404(client, app):
    app.state.image_store.default_path.unlink()
    assert client.get("/images/nonexistent.jpg").status_code == 404


@pytest.mark.parametrize("path", ["/images/..%2Fsecret.jpg", "/images/a%2F..%2F..%2Fb.jpg", "/images/photo.png"])
def test_invalid_image_names_are_bad_requests(client, path):
    assert client.get(path).status_code == 400


def test_duplicate_uploads_share_one_blob(client, app):
    _post_item(client, name="shoes", image=b"same")
    _post_item(client, name="boots", image=b"same")

    items = client.get("/items").json()["items"]
    assert items[0]["image"] == items[1]["image"]
    assert len(app.state.image_store.list_images()) == 1


@pytest.mark.parametrize(
    "data, files, detail",
    [
        ({"category": "fashion"}, {"image": ("a.jpg", b"x", "image/jpeg")}, "name is required"),
        ({"name": "shoes"}, {"image": ("a.jpg", b"x", "image/jpeg")}, "category is required"),
        ({"name": "shoes", "category": "fashion"}, None, "image is required"),
    ],
)
def test_add_item_validation(client, data, files, detail):
    response = client.post("/items", data=data, files=files)
    assert response.status_code == 400
    assert response.json()["detail"] == detail


def test_add_item_rejects_empty_image(client):
    response = _post_item(client, image=b"")
    assert response.status_code == 400
    assert client.get("/items").json() == {"items": []}


def test_get_item_requires_integer_id(client):
    response = client.get("/items/abc")
    assert response.status_code == 400
    assert response.json()["detail"] == "id must be an int"


@pytest.mark.parametrize("item_id", ["0", "-1", "2"])
def test_get_item_not_found(client, item_id):
    _post_item(client)
    response = client.get(f"/items/{item_id}")
    assert response.status_code == 404
    assert response.json()["detail"] == "item not found"


def test_search(client):
    _post_item(client, name="shoes", category="fashion", image=b"a")
    _post_item(client, name="ball", category="toys", image=b"b")

    assert [i["name"] for i in client.get("/search", params={"keyword": "fash"}).json()["items"]] == ["shoes"]
    assert [i["name"] for i in client.get("/search").json()["items"]] == ["shoes", "ball"]
    assert client.get("/search", params={"keyword": "Fash"}).json() == {"items": []}


def test_storage_failure_hides_details(settings):
    repository = MagicMock(spec=ItemRepository)
    repository.list_all.side_effect = StorageError("disk on fire at /var/secret")
    client = TestClient(create_app(settings, repository=repository))

    response = client.get("/items")
    assert response.status_code == 500
    assert response.json() == {"detail": "internal server error"}
    assert "secret" not in response.text


def test_cors_allows_front_url(client):
    response = client.options(
        "/items",
        headers={"Origin": FRONT_URL, "Access-Control-Request-Method": "POST"},
    )
    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == FRONT_URL


def test_json_backend_app(tmp_path):
    settings = Settings(image_dir=tmp_path / "images", backend="json", items_file=tmp_path / "items.json")
    client = TestClient(create_app(settings))

    _post_item(client)
    assert client.get("/items/1").json()["name"] == "shoes"
    assert (tmp_path / "items.json").exists()


def test_injected_logger_reaches_default_stores(settings):
    custom = logging.getLogger("test.catalog")
    app = create_app(settings, logger=custom)

    assert app.state.repository.logger is custom
    assert app.state.image_store.logger is custom

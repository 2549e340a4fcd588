"""HTTP client for a running catalog service.

Used by the CLI when ``CATALOG_API_URL`` is set, and usable on its own by
other tools that need to add or read items remotely.
"""

from typing import Optional

import requests

from ..core.models import Item
from ..errors import CatalogError, ItemNotFound


class CatalogAPIError(CatalogError):
    """Raised when the catalog service is unreachable or returns an error."""
    pass


class CatalogAPI:
    """Client for the catalog HTTP API.

    API format:
        GET  {base_url}/items              -> {"items": [{name, category, image}]}
        POST {base_url}/items              multipart name, category, image
        GET  {base_url}/items/{id}         -> {name, category, image}
        GET  {base_url}/search?keyword=... -> {"items": [...]}
        GET  {base_url}/images/{filename}  -> image/jpeg bytes
    """

    def __init__(self, base_url: str, timeout: float = 30.0, session: Optional[requests.Session] = None):
        """Initialize the client.

        Args:
            base_url: Base URL of the service (e.g., 'http://localhost:9000')
            timeout: Request timeout in seconds
            session: Optional requests session to reuse connections
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def _request(self, method: str, path: str, **kwargs) -> requests.Response:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise CatalogAPIError(f"Request failed: {e}") from e
        return response

    @staticmethod
    def _check(response: requests.Response) -> None:
        if not 200 <= response.status_code < 300:
            raise CatalogAPIError(f"API error {response.status_code}: {response.text}")

    @staticmethod
    def _items(data: dict) -> list[Item]:
        return [Item.from_dict(record) for record in data.get("items") or []]

    def list_items(self) -> list[Item]:
        response = self._request("GET", "/items")
        self._check(response)
        return self._items(response.json())

    def get_item(self, item_id: int) -> Item:
        """Fetch one item.

        Raises:
            ItemNotFound: If the service answers 404
            CatalogAPIError: On any other failure
        """
        response = self._request("GET", f"/items/{item_id}")
        if response.status_code == 404:
            raise ItemNotFound(f"item not found: {item_id}")
        self._check(response)
        item = Item.from_dict(response.json())
        item.id = item_id
        return item

    def search(self, keyword: str = "") -> list[Item]:
        response = self._request("GET", "/search", params={"keyword": keyword})
        self._check(response)
        return self._items(response.json())

    def add_item(self, name: str, category: str, image: bytes, filename: str = "image.jpg") -> str:
        """Upload a new item and return the service's confirmation message."""
        response = self._request(
            "POST",
            "/items",
            data={"name": name, "category": category},
            files={"image": (filename, image, "image/jpeg")},
        )
        self._check(response)
        return response.json().get("message", "")

    def get_image(self, name: str) -> bytes:
        """Download an image; the service substitutes its default when absent."""
        response = self._request("GET", f"/images/{name}")
        self._check(response)
        return response.content

    def health_check(self) -> bool:
        """Return True if the service answers on its root endpoint."""
        try:
            response = self.session.get(f"{self.base_url}/", timeout=5.0)
        except requests.RequestException:
            return False
        return response.status_code < 500

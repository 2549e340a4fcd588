"""FastAPI server exposing the item store and the image store."""
import logging
import time
from typing import Optional

from fastapi import FastAPI, File, Form, HTTPException, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse

from ..config import Settings, load_settings
from ..core.image_store import ImageStore
from ..core.models import Item
from ..errors import InvalidInput, ItemNotFound, StorageError
from ..log import get_logger
from ..storage.repository import ItemRepository, open_repository
from .schemas import ItemListResponse, ItemResponse, MessageResponse

CORS_METHODS = ["GET", "HEAD", "POST", "OPTIONS"]


def _to_response(item: Item) -> ItemResponse:
    return ItemResponse(**item.to_dict())


def create_app(
    settings: Optional[Settings] = None,
    repository: Optional[ItemRepository] = None,
    image_store: Optional[ImageStore] = None,
    logger: Optional[logging.Logger] = None,
) -> FastAPI:
    """Build the application.

    Stores not passed in are created from ``settings`` (loaded from the
    environment when omitted).
    """
    settings = settings or load_settings()
    store_logger = logger
    logger = get_logger(__name__, logger)
    if repository is None:
        repository = open_repository(settings, logger=store_logger)
    if image_store is None:
        image_store = ImageStore(settings.image_dir, logger=store_logger)
    image_store.ensure_default_image()

    app = FastAPI(title="Catalog", version="0.1.0")
    app.state.settings = settings
    app.state.repository = repository
    app.state.image_store = image_store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.front_url],
        allow_methods=CORS_METHODS,
        allow_headers=["*"],
    )

    # -----------------------------------------------------------------------
    # Middleware and error mapping
    # -----------------------------------------------------------------------

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info(
            "%s %s %d %.1fms",
            request.method, request.url.path, response.status_code, elapsed_ms,
        )
        return response

    @app.exception_handler(ItemNotFound)
    async def item_not_found(request: Request, exc: ItemNotFound):
        return JSONResponse(status_code=404, content={"detail": "item not found"})

    @app.exception_handler(InvalidInput)
    async def invalid_input(request: Request, exc: InvalidInput):
        logger.warning("bad request on %s: %s", request.url.path, exc)
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(StorageError)
    async def storage_failure(request: Request, exc: StorageError):
        logger.error("storage failure on %s %s", request.method, request.url.path, exc_info=exc)
        return JSONResponse(status_code=500, content={"detail": "internal server error"})

    # -----------------------------------------------------------------------
    # Routes
    # -----------------------------------------------------------------------

    @app.get("/", response_model=MessageResponse)
    def hello():
        return MessageResponse(message="Hello, world!")

    @app.get("/items", response_model=ItemListResponse)
    def get_items():
        return ItemListResponse(items=[_to_response(i) for i in repository.list_all()])

    @app.post("/items", response_model=MessageResponse)
    def add_item(
        name: str = Form(""),
        category: str = Form(""),
        image: Optional[UploadFile] = File(None),
    ):
        if not name:
            raise InvalidInput("name is required")
        if not category:
            raise InvalidInput("category is required")
        if image is None:
            raise InvalidInput("image is required")
        data = image.file.read()
        if not data:
            raise InvalidInput("uploaded image is empty")

        image_name = image_store.put(data)
        message = f"item received: {name}"
        logger.info(message)
        repository.insert(Item(name=name, category=category, image_name=image_name))
        return MessageResponse(message=message)

    @app.get("/items/{item_id}", response_model=ItemResponse)
    def get_item(item_id: str):
        try:
            parsed = int(item_id)
        except ValueError:
            raise InvalidInput("id must be an int") from None
        return _to_response(repository.select(parsed))

    @app.get("/search", response_model=ItemListResponse)
    def search_items(keyword: str = ""):
        return ItemListResponse(items=[_to_response(i) for i in repository.search(keyword)])

    @app.get("/images/{filename:path}")
    def get_image(filename: str):
        path = image_store.resolve_or_default(filename)
        if not path.is_file():
            # the default image itself has been removed
            raise HTTPException(status_code=404, detail="image not found")
        logger.info("returned image %s", path)
        return FileResponse(path, media_type="image/jpeg")

    return app

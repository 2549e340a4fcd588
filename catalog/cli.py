"""Command-line interface for the catalog.

Commands work against the local stores configured in the settings, or
against a running service when ``CATALOG_API_URL`` (``api_url``) is set.

Environment variables: see ``catalog.config``.
"""

import argparse
import sys
from pathlib import Path

from tqdm import tqdm

from .api.catalog_api import CatalogAPI
from .config import Settings, load_settings
from .core.image_store import ImageStore
from .core.models import Item
from .errors import CatalogError, InvalidInput
from .log import configure_logging
from .storage.repository import open_repository


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _try_get_api_client(settings: Settings) -> "CatalogAPI | None":
    """Return an API client if ``api_url`` is configured, else None."""
    if not settings.api_url:
        return None
    return CatalogAPI(base_url=settings.api_url)


def _print_items(items: list[Item]) -> None:
    if not items:
        print("No items found")
        return

    print(f"{'ID':>5}  {'Name':<24} {'Category':<16} Image")
    print("-" * 80)
    for item in items:
        item_id = item.id if item.id is not None else "-"
        print(f"{item_id:>5}  {item.name:<24} {item.category:<16} {item.image_name or '-'}")
    print(f"\nTotal: {len(items)} item(s)")


def _add_local(settings: Settings, name: str, category: str, data: bytes) -> Item:
    store = ImageStore(settings.image_dir)
    repo = open_repository(settings)
    image_name = store.put(data)
    return repo.insert(Item(name=name, category=category, image_name=image_name))


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

def add(args):
    """Add an item with its photo."""
    if not args.name:
        raise InvalidInput("name is required")
    if not args.category:
        raise InvalidInput("category is required")

    path = Path(args.image)
    if not path.is_file():
        raise InvalidInput(f"{path} does not exist")
    try:
        data = path.read_bytes()
    except OSError as e:
        raise InvalidInput(f"cannot read {path}: {e}") from e
    if not data:
        raise InvalidInput(f"{path} is empty")

    api = _try_get_api_client(args.settings)
    if api is not None:
        print(api.add_item(args.name, args.category, data, filename=path.name))
        return

    item = _add_local(args.settings, args.name, args.category, data)
    print(f"Added: {item.name} (id: {item.id}, image: {item.image_name})")


def list_items(args):
    """List all items."""
    api = _try_get_api_client(args.settings)
    items = api.list_items() if api is not None else open_repository(args.settings).list_all()
    _print_items(items)


def show(args):
    """Show a single item by id."""
    api = _try_get_api_client(args.settings)
    if api is not None:
        item = api.get_item(args.id)
    else:
        item = open_repository(args.settings).select(args.id)

    print(f"ID:       {item.id}")
    print(f"Name:     {item.name}")
    print(f"Category: {item.category}")
    print(f"Image:    {item.image_name or '-'}")


def search(args):
    """Search items by name or category substring."""
    api = _try_get_api_client(args.settings)
    if api is not None:
        items = api.search(args.keyword)
    else:
        items = open_repository(args.settings).search(args.keyword)
    _print_items(items)


def import_dir(args):
    """Add one item per JPEG file found in a directory."""
    path = Path(args.path)
    if not path.is_dir():
        raise InvalidInput(f"{path} is not a directory")
    if not args.category:
        raise InvalidInput("category is required")

    pattern = "**/*" if args.recursive else "*"
    files = sorted(
        p for p in path.glob(pattern)
        if p.is_file() and p.suffix.lower() in ImageStore.IMAGE_SUFFIXES
    )
    if not files:
        print(f"No .jpg/.jpeg files found in {path}")
        return

    store = ImageStore(args.settings.image_dir)
    repo = open_repository(args.settings)
    added = 0
    for filepath in tqdm(files, desc="Importing", unit="img"):
        try:
            data = filepath.read_bytes()
        except OSError as e:
            raise InvalidInput(f"cannot read {filepath}: {e}") from e
        if not data:
            tqdm.write(f"Skipped (empty): {filepath.name}")
            continue
        image_name = store.put(data)
        repo.insert(Item(name=filepath.stem, category=args.category, image_name=image_name))
        added += 1

    print(f"\nImported {added} item(s) into '{args.category}'. Total items: {repo.count()}")


def images(args):
    """List stored image blobs."""
    store = ImageStore(args.settings.image_dir)
    stored = store.list_images()
    if not stored:
        print("No images stored")
        return

    print(f"{'Hash':<20} {'Size':>12} {'Dimensions':>12}")
    print("-" * 48)
    for img in stored:
        dims = f"{img.width}x{img.height}" if img.width is not None else "unknown"
        print(f"{img.hash[:18]}.. {img.size:>10} B {dims:>12}")
    print(f"\nTotal: {len(stored)} image(s)")


def image_path(args):
    """Print the file served for an image name (default image when absent)."""
    store = ImageStore(args.settings.image_dir)
    store.ensure_default_image()
    print(store.resolve_or_default(args.name))


def serve(args):
    """Run the HTTP server."""
    from .server.run import serve as run_server

    run_server(
        args.settings,
        host=args.host,
        port=args.port,
        reload=args.reload,
        config_path=args.config,
    )


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Catalog - items with content-addressed photos"
    )
    parser.add_argument(
        "--config", "-c",
        default=None,
        help="Path to YAML config file (default: $CATALOG_CONFIG)"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    add_parser = subparsers.add_parser("add", help="Add an item with a photo")
    add_parser.add_argument("name", help="Item name")
    add_parser.add_argument("category", help="Category name (created if new)")
    add_parser.add_argument("image", help="Path to the item photo")
    add_parser.set_defaults(func=add)

    list_parser = subparsers.add_parser("list", help="List all items")
    list_parser.set_defaults(func=list_items)

    show_parser = subparsers.add_parser("show", help="Show an item by id")
    show_parser.add_argument("id", type=int, help="Item id")
    show_parser.set_defaults(func=show)

    search_parser = subparsers.add_parser("search", help="Search items by name or category")
    search_parser.add_argument("keyword", nargs="?", default="", help="Substring to match (case-sensitive)")
    search_parser.set_defaults(func=search)

    import_parser = subparsers.add_parser("import", help="Add every JPEG in a directory as an item")
    import_parser.add_argument("path", help="Directory to import")
    import_parser.add_argument("--category", required=True, help="Category for the imported items")
    import_parser.add_argument("--recursive", "-r", action="store_true", help="Include subdirectories")
    import_parser.set_defaults(func=import_dir)

    images_parser = subparsers.add_parser("images", help="List stored image blobs")
    images_parser.set_defaults(func=images)

    image_parser = subparsers.add_parser("image-path", help="Resolve an image name to a file")
    image_parser.add_argument("name", help="Image file name")
    image_parser.set_defaults(func=image_path)

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP server")
    serve_parser.add_argument("--host", default=None, help="Host to bind to")
    serve_parser.add_argument("--port", type=int, default=None, help="Port to bind to")
    serve_parser.add_argument("--reload", action="store_true", help="Enable auto-reload")
    serve_parser.set_defaults(func=serve)

    args = parser.parse_args(argv)

    try:
        args.settings = load_settings(args.config)
        configure_logging(args.settings.log_level)
        args.func(args)
    except CatalogError as e:
        print(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()

"""Entry point for the catalog HTTP server."""
import argparse
import os
from typing import Optional

import uvicorn

from ..config import Settings, load_settings
from ..errors import ConfigError
from ..log import configure_logging


def serve(
    settings: Settings,
    host: Optional[str] = None,
    port: Optional[int] = None,
    reload: bool = False,
    config_path: Optional[str] = None,
) -> None:
    """Run the app under uvicorn until interrupted.

    The app factory loads its own settings in the worker, so a YAML config
    file is handed on through ``CATALOG_CONFIG``.
    """
    if config_path:
        os.environ["CATALOG_CONFIG"] = str(config_path)
    configure_logging(settings.log_level)
    uvicorn.run(
        "catalog.server.app:create_app",
        factory=True,
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
        log_level=settings.log_level.lower(),
    )


def main():
    parser = argparse.ArgumentParser(description="Catalog HTTP server")
    parser.add_argument("--host", default=None, help="Host to bind to (default: from settings)")
    parser.add_argument("--port", type=int, default=None, help="Port to bind to (default: from settings)")
    parser.add_argument("--reload", action="store_true", help="Enable auto-reload")
    parser.add_argument("--config", "-c", default=None, help="Path to YAML config file")
    args = parser.parse_args()

    try:
        settings = load_settings(args.config)
    except ConfigError as e:
        parser.exit(1, f"Error: {e}\n")

    serve(settings, host=args.host, port=args.port, reload=args.reload, config_path=args.config)


if __name__ == "__main__":
    main()

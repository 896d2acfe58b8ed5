"""Command-line interface for the home service."""

from __future__ import annotations

import argparse
import logging
from typing import Sequence

from home_service.core.config import get_settings
from home_service.core.logging import configure_logging

logger = logging.getLogger("home_service.cli")

APP_IMPORT_PATH = "home_service.app:app"


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="template-home-service utilities")
    parser.add_argument(
        "command",
        nargs="?",
        choices=("serve", "init-db"),
        default="serve",
        help="serve (default) runs the HTTP API; init-db creates the schema and exits",
    )
    parser.add_argument("--host", default="0.0.0.0", help="Bind address for the API")
    parser.add_argument("--port", type=int, default=8080, help="Port for the API")
    parser.add_argument("--reload", action="store_true", help="Restart on code changes (development)")
    return parser.parse_args(argv)


def _serve(*, host: str, port: int, reload: bool) -> None:
    import uvicorn

    logger.info("Starting user API on http://%s:%s", host, port)
    if reload:
        # the reloader needs an import string, not an app instance
        uvicorn.run(APP_IMPORT_PATH, host=host, port=port, reload=True, log_level="info")
        return

    from home_service.app import app

    uvicorn.run(app, host=host, port=port, log_level="info")


def main(argv: Sequence[str] | None = None) -> None:
    """Entry point for CLI usage."""
    configure_logging(get_settings().log_level)
    args = _parse_args(argv)

    if args.command == "serve":
        _serve(host=args.host, port=args.port, reload=args.reload)
    elif args.command == "init-db":
        from home_service.db.create_tables import create_all

        create_all()
        print("Database initialisation complete.")


if __name__ == "__main__":
    main()

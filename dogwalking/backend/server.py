"""Run the dog walking API under uvicorn."""

from __future__ import annotations

import argparse
import logging

import uvicorn

from dogwalking.backend.api import create_app
from dogwalking.backend.config import BackendSettings, configure_logging, load_settings
from dogwalking.backend.pictures import picture_loader
from dogwalking.backend.store import create_store

logger = logging.getLogger(__name__)


def parse_args(settings: BackendSettings, argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Dog walking API server")
    parser.add_argument("--host", default=settings.host)
    parser.add_argument("--port", type=int, default=settings.port)
    parser.add_argument("--log-level", default=settings.log_level)
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    settings = load_settings()
    args = parse_args(settings, argv)
    configure_logging(args.log_level.upper())

    store = create_store(settings.database_url)
    logger.info("Using %s", type(store).__name__)
    app = create_app(store=store, fetch_picture=picture_loader(settings.picture_path))

    logger.info("Listening on %s:%s", args.host, args.port)
    uvicorn.run(app, host=args.host, port=args.port, log_level=args.log_level.lower())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

"""Configuration helpers for backend runtime."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


@dataclass(frozen=True)
class BackendSettings:
    database_url: str | None
    host: str
    port: int
    picture_path: Path | None
    log_level: str


def load_settings() -> BackendSettings:
    port_raw = os.getenv("DOGWALKING_PORT", "8000")
    picture_raw = os.getenv("DOGWALKING_PICTURE_PATH")
    return BackendSettings(
        database_url=os.getenv("DOGWALKING_DATABASE_URL"),
        host=os.getenv("DOGWALKING_HOST", "127.0.0.1"),
        port=int(port_raw),
        picture_path=Path(picture_raw) if picture_raw else None,
        log_level=os.getenv("DOGWALKING_LOG_LEVEL", "INFO").upper(),
    )


def configure_logging(level: str) -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT)

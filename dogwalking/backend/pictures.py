"""Picture source for the friends response."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable

logger = logging.getLogger(__name__)

DEFAULT_PICTURE_PATH = Path(__file__).with_name("assets") / "friends.gif"


def load_picture(path: Path) -> bytes:
    """Read the picture, returning empty bytes when it cannot be read."""
    try:
        return path.read_bytes()
    except OSError as exc:
        logger.warning("Could not read picture %s: %s", path, exc)
        return b""


def picture_loader(path: Path | None = None) -> Callable[[], bytes]:
    picture_path = path if path is not None else DEFAULT_PICTURE_PATH
    return lambda: load_picture(picture_path)

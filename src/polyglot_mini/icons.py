"""Poly bubble icon helpers."""

from __future__ import annotations

import io

from PIL import Image, UnidentifiedImageError

from polyglot_mini.ui import DEFAULT_ICON_SIZE
from polyglot_mini.utils import logger

MAX_ICON_BYTES = 1 << 20


def icon_resolution(data: bytes | None, default: int = DEFAULT_ICON_SIZE) -> int:
    """Return the pixel width of the encoded image ``data``.

    Missing or undecodable images yield ``default``.
    """
    if not data:
        logger.debug("no icon data, using %dpx", default)
        return default
    try:
        with Image.open(io.BytesIO(data)) as img:
            return int(img.width)
    except (UnidentifiedImageError, OSError, ValueError) as exc:
        logger.warning("failed to get icon resolution: %s", exc)
        return default


__all__ = ["MAX_ICON_BYTES", "icon_resolution"]

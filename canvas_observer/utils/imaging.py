"""Snapshot encoding: base64 / data-URL decode, adaptive resize, JPEG re-encode."""

from __future__ import annotations

import base64
import io
import logging

from PIL import Image

logger = logging.getLogger(__name__)

_DATA_URL_PREFIX = "data:image/jpeg;base64,"


def strip_data_url(image: str) -> str:
    """Return the raw base64 part of a data URL (or the input if it has no prefix)."""
    if image.startswith("data:") and "," in image:
        return image.split(",", 1)[1]
    return image


def decode_image(image: str) -> Image.Image:
    """Decode a base64 string (with or without data URI prefix) to a PIL Image."""
    return Image.open(io.BytesIO(base64.b64decode(strip_data_url(image))))


def _flatten(image: Image.Image) -> Image.Image:
    """JPEG has no alpha; composite transparent canvas pixels onto white."""
    if image.mode in ("RGBA", "LA") or (image.mode == "P" and "transparency" in image.info):
        rgba = image.convert("RGBA")
        background = Image.new("RGB", rgba.size, (255, 255, 255))
        background.paste(rgba, mask=rgba.getchannel("A"))
        return background
    return image.convert("RGB")


def compress_image(
    image: str,
    quality: float = 0.8,
    *,
    low_quality_cutoff: float = 0.7,
    active_max_width: int = 800,
    idle_max_width: int = 1200,
) -> str:
    """Re-encode a snapshot as JPEG at ``quality`` (0-1), returned as a data URL.

    Lower qualities also get a narrower max width, so snapshots taken while
    the student is mid-drawing are cheap to send.
    """
    if not image:
        return ""

    img = _flatten(decode_image(image))

    max_width = active_max_width if quality < low_quality_cutoff else idle_max_width
    if img.width > max_width:
        scale = max_width / img.width
        img = img.resize((max_width, max(1, round(img.height * scale))), Image.LANCZOS)

    buffer = io.BytesIO()
    jpeg_quality = max(1, min(95, round(quality * 100)))
    img.save(buffer, format="JPEG", quality=jpeg_quality)
    encoded = base64.b64encode(buffer.getvalue()).decode("ascii")
    logger.debug("Compressed snapshot to %dx%d q=%d (%d chars)", img.width, img.height, jpeg_quality, len(encoded))
    return _DATA_URL_PREFIX + encoded

"""
Image processor — fit-inside resize without enlargement.

Uses Pillow for image manipulation. Each variant keeps the source's aspect
ratio, is no larger than the target in either dimension, and is never larger
than the source. Output is encoded in the source's own format (JPEG stays
JPEG, PNG stays PNG, ...).
"""
from __future__ import annotations

import io
import logging

from PIL import Image

from imageresizer.constants import ImageSize

logger = logging.getLogger(__name__)


class ImageProcessor:
    """Resize a single decoded image into any number of target sizes."""

    def __init__(self, image_data: bytes) -> None:
        self._image = Image.open(io.BytesIO(image_data))
        # Copies drop .format, so remember it before resizing
        self._format = self._image.format
        self._image.load()

    @property
    def format(self) -> str | None:
        return self._format

    @property
    def size(self) -> tuple[int, int]:
        return self._image.size

    def resize(self, size: ImageSize) -> bytes:
        """Fit within ``size`` and return encoded bytes in the source format."""
        img = self._fit_within(size.width, size.height)
        buf = io.BytesIO()
        img.save(buf, format=self._format)
        logger.debug(
            "Resized %sx%s -> %sx%s (%s)",
            self._image.width, self._image.height, img.width, img.height, self._format,
        )
        return buf.getvalue()

    def _fit_within(self, max_width: int, max_height: int) -> Image.Image:
        """Resize to fit within max dimensions, maintaining aspect ratio.

        ``thumbnail`` only ever shrinks, so smaller images pass through at
        their original size.
        """
        img = self._image.copy()
        img.thumbnail((max_width, max_height), Image.LANCZOS)
        return img

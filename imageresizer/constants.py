"""
Image resizer — static constants and the target size type.
"""
from __future__ import annotations

from typing import NamedTuple

# Strips a data-URI header such as "data:image/png;base64," from an upload.
DATA_URI_PATTERN = r"^data:image/\w+;base64,"

# Metadata key under which the client's filename is stored on the source object.
ORIGINAL_NAME_METADATA_KEY = "originalname"

URL_MODE_PAIR = "pair"
URL_MODE_SINGLE = "single"

# Lambda proxy response headers
JSON_HEADERS: dict[str, str] = {
    "Content-Type": "application/json",
    "Access-Control-Allow-Origin": "*",
}

UPLOAD_HEADERS: dict[str, str] = {
    **JSON_HEADERS,
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


class ImageSize(NamedTuple):
    """A resize target. Its label prefixes the derived object's key."""
    width: int
    height: int

    @property
    def label(self) -> str:
        return f"{self.width}x{self.height}"


def parse_sizes(value: str) -> list[ImageSize]:
    """Parse ``"200x200,800x600"`` into an ordered list of sizes."""
    sizes: list[ImageSize] = []
    for item in value.split(","):
        item = item.strip().lower()
        if not item:
            continue
        width, sep, height = item.partition("x")
        if not sep or not width.isdigit() or not height.isdigit():
            raise ValueError(f"Invalid target size: {item!r}")
        size = ImageSize(int(width), int(height))
        if size.width <= 0 or size.height <= 0:
            raise ValueError(f"Target size must be positive: {item!r}")
        sizes.append(size)
    return sizes

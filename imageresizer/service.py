"""
Image resizer — service layer.

Pure business logic shared by the Lambda entry points and the local gateway.
Every function takes its ObjectStore and Settings as arguments; none of them
builds clients or reads the environment.
"""
from __future__ import annotations

import base64
import binascii
import json
import logging
import re
import time
import urllib.parse
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from imageresizer.constants import (
    DATA_URI_PATTERN,
    ORIGINAL_NAME_METADATA_KEY,
    URL_MODE_SINGLE,
    ImageSize,
)
from imageresizer.exceptions import (
    ImageTooLarge,
    InvalidDimensions,
    InvalidImageData,
    InvalidJsonBody,
    MissingBody,
    MissingKeyParameter,
    MissingUploadFields,
    UnsupportedImageType,
)
from imageresizer.processor import ImageProcessor
from imageresizer.schemas import (
    ResizeResult,
    SignedUrlQuery,
    SignedUrlResponse,
    SignedUrlSetResponse,
    UploadRequest,
    UploadResponse,
)

if TYPE_CHECKING:
    from imageresizer.config import Settings
    from imageresizer.s3 import ObjectStore

logger = logging.getLogger(__name__)

_DATA_URI_RE = re.compile(DATA_URI_PATTERN)
_UPLOAD_FIELDS = ("filename", "contentType", "base64Image")


# ── Keys ─────────────────────────────────────────────────────────────────────

def build_source_key(filename: str, now_ms: int | None = None) -> str:
    """``{epoch-millis}-{filename}``. No collision check is made."""
    if now_ms is None:
        now_ms = time.time_ns() // 1_000_000
    return f"{now_ms}-{filename}"


def build_derived_key(size: ImageSize, source_key: str) -> str:
    return f"{size.label}/{source_key}"


def decode_event_key(raw_key: str) -> str:
    """S3 event keys are URL-encoded with spaces as '+'."""
    return urllib.parse.unquote_plus(raw_key)


# ── Upload ───────────────────────────────────────────────────────────────────

def parse_upload_request(body: str | bytes | None) -> UploadRequest:
    """Validate a raw ``POST /upload`` body into an UploadRequest."""
    if not body:
        raise MissingBody()
    try:
        payload = json.loads(body)
    except (TypeError, ValueError):
        raise InvalidJsonBody()
    if not isinstance(payload, dict):
        raise InvalidJsonBody()

    if any(not payload.get(name) for name in _UPLOAD_FIELDS):
        raise MissingUploadFields()
    try:
        return UploadRequest.model_validate(payload)
    except ValidationError:
        raise MissingUploadFields()


def decode_image(base64_image: str, max_bytes: int) -> bytes:
    """Strip an optional data-URI header, decode, and enforce the size limit."""
    data = _DATA_URI_RE.sub("", base64_image, count=1)
    try:
        decoded = base64.b64decode(data)
    except (binascii.Error, ValueError):
        raise InvalidImageData()
    if len(decoded) > max_bytes:
        raise ImageTooLarge(max_bytes // (1024 * 1024))
    return decoded


def store_upload(
    request: UploadRequest,
    store: ObjectStore,
    settings: Settings,
) -> UploadResponse:
    """Validate the image and write it to the source bucket."""
    if request.content_type not in settings.allowed_content_types_set:
        raise UnsupportedImageType()

    image_data = decode_image(request.base64_image, settings.max_upload_bytes)
    key = build_source_key(request.filename)

    logger.info("Uploading to S3: bucket=%s key=%s", settings.source_bucket, key)
    store.put_object(
        settings.source_bucket,
        key,
        image_data,
        content_type=request.content_type,
        metadata={ORIGINAL_NAME_METADATA_KEY: request.filename},
    )
    return UploadResponse(
        filename=key,
        url=store.public_url(settings.source_bucket, key),
    )


# ── Resize ───────────────────────────────────────────────────────────────────

def resize_source_object(
    bucket: str,
    key: str,
    store: ObjectStore,
    settings: Settings,
) -> ResizeResult:
    """Produce one variant per target size, in order.

    Sizes are processed sequentially; the first exception propagates and the
    remaining sizes are skipped.
    """
    logger.info("Processing image: s3://%s/%s", bucket, key)
    original = store.get_object(bucket, key)
    processor = ImageProcessor(original.body)

    variants: list[str] = []
    for size in settings.target_size_list:
        logger.info("Processing size %s for %s", size.label, key)
        resized = processor.resize(size)
        resized_key = build_derived_key(size, key)
        store.put_object(
            settings.resized_bucket,
            resized_key,
            resized,
            content_type=original.content_type,
        )
        logger.info("Successfully uploaded resized image: %s", resized_key)
        variants.append(resized_key)

    return ResizeResult(key=key, variants=variants)


def iter_event_objects(event: dict[str, Any]):
    """Yield ``(bucket, key)`` for each record of an S3 notification event."""
    for record in event.get("Records", []):
        s3_info = record.get("s3", {})
        bucket = s3_info.get("bucket", {}).get("name", "")
        key = decode_event_key(s3_info.get("object", {}).get("key", ""))
        yield bucket, key


# ── Signed URLs ──────────────────────────────────────────────────────────────

def parse_url_query(params: dict[str, Any] | None, settings: Settings) -> SignedUrlQuery:
    """Validate the query string. Dimensions are only read in single mode."""
    if not params or not params.get("key"):
        raise MissingKeyParameter()
    if settings.url_mode != URL_MODE_SINGLE:
        params = {"key": params["key"]}
    try:
        return SignedUrlQuery.model_validate(params)
    except ValidationError:
        raise InvalidDimensions()


def signed_url_set(
    query: SignedUrlQuery,
    store: ObjectStore,
    settings: Settings,
) -> SignedUrlSetResponse:
    """Sign one derived key per target size. Size parameters are ignored."""
    expires_in = settings.url_expiry_seconds
    urls = [
        store.presigned_get_url(
            settings.resized_bucket, build_derived_key(size, query.key), expires_in,
        )
        for size in settings.target_size_list
    ]
    return SignedUrlSetResponse(urls=urls, expires_in=expires_in)


def signed_url(
    query: SignedUrlQuery,
    store: ObjectStore,
    settings: Settings,
) -> SignedUrlResponse:
    """Sign a single key.

    With both ``width`` and ``height`` the derived key is signed; otherwise the
    raw key is signed as given, which only resolves if an object of that exact
    name exists in the resized bucket.
    """
    if query.width is not None and query.height is not None:
        key = build_derived_key(ImageSize(query.width, query.height), query.key)
    else:
        key = query.key
    expires_in = settings.url_expiry_seconds
    return SignedUrlResponse(
        url=store.presigned_get_url(settings.resized_bucket, key, expires_in),
        expires_in=expires_in,
    )


def signed_urls(
    query: SignedUrlQuery,
    store: ObjectStore,
    settings: Settings,
) -> SignedUrlResponse | SignedUrlSetResponse:
    """Dispatch on the configured URL mode."""
    if settings.url_mode == URL_MODE_SINGLE:
        return signed_url(query, store, settings)
    return signed_url_set(query, store, settings)

"""
Local gateway — HTTP routes.

Serves the same contract as the API Gateway + Lambda deployment. Bodies and
query strings go through the same validation as the Lambda entry points so
status codes and messages match.
"""
from __future__ import annotations

import asyncio
import logging

from fastapi import APIRouter, BackgroundTasks, Depends, Query, Request, Response, status
from fastapi.responses import JSONResponse

from imageresizer.config import Settings, get_settings
from imageresizer.s3 import ObjectStore, get_object_store
from imageresizer.schemas import SignedUrlResponse, SignedUrlSetResponse, UploadResponse
from imageresizer.service import (
    parse_upload_request,
    parse_url_query,
    resize_source_object,
    signed_urls,
    store_upload,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["images"])


def _get_store() -> ObjectStore:
    return get_object_store()


def _get_settings() -> Settings:
    return get_settings()


# ── Upload ───────────────────────────────────────────────────────────────────

@router.options("/upload", include_in_schema=False)
async def upload_preflight() -> Response:
    return Response(status_code=status.HTTP_200_OK)


@router.post(
    "/upload",
    response_model=UploadResponse,
    summary="Upload a base64-encoded image",
    description=(
        "Accepts {filename, contentType, base64Image}. The image is written to "
        "the source bucket as {epoch-ms}-{filename}; resizing happens "
        "asynchronously from the bucket notification."
    ),
)
async def upload_image(
    request: Request,
    background_tasks: BackgroundTasks,
    store: ObjectStore = Depends(_get_store),
    settings: Settings = Depends(_get_settings),
) -> Response:
    upload = parse_upload_request(await request.body())

    # boto3 is blocking, offload to a thread
    loop = asyncio.get_running_loop()
    result = await loop.run_in_executor(
        None, lambda: store_upload(upload, store, settings),
    )

    if settings.inline_resize:
        background_tasks.add_task(
            _resize_background, settings.source_bucket, result.filename, store, settings,
        )
    return JSONResponse(content=result.to_body())


def _resize_background(
    bucket: str,
    key: str,
    store: ObjectStore,
    settings: Settings,
) -> None:
    """Stand-in for the S3 notification when running without AWS wiring."""
    try:
        resize_source_object(bucket, key, store, settings)
    except Exception:
        logger.exception("Inline resize failed for s3://%s/%s", bucket, key)


# ── Signed URLs ──────────────────────────────────────────────────────────────

@router.get(
    "/get-url",
    response_model=SignedUrlResponse | SignedUrlSetResponse,
    summary="Get presigned download URLs for resized variants",
    description=(
        "Returns presigned GET URLs valid for the configured expiry. "
        "Signing does not check that the object exists."
    ),
)
async def get_url(
    key: str | None = Query(default=None, description="Source object key"),
    width: str | None = Query(default=None, description="Variant width (single mode)"),
    height: str | None = Query(default=None, description="Variant height (single mode)"),
    store: ObjectStore = Depends(_get_store),
    settings: Settings = Depends(_get_settings),
) -> Response:
    params = {"key": key, "width": width, "height": height}
    query = parse_url_query(
        {name: value for name, value in params.items() if value is not None},
        settings,
    )
    result = signed_urls(query, store, settings)
    return JSONResponse(content=result.to_body())

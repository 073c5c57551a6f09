"""
AWS Lambda handler — Image Resize

Triggered by S3 ObjectCreated events on the source bucket.

Flow:
  1. For each record, downloads the original image from S3.
  2. Resizes it to fit inside every configured target size (default 200x200
     and 800x600), keeping the aspect ratio and never enlarging.
  3. Uploads each variant to the resized bucket as {w}x{h}/{source-key},
     with the source's content type.

Any failure is logged and re-raised so the invocation fails and the
platform's redelivery policy applies. There is no in-handler retry.

Environment variables:
  RESIZED_BUCKET  — S3 bucket for resized variants
  TARGET_SIZES    — comma-separated WxH list (default 200x200,800x600)
"""
from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING

from imageresizer.config import Settings, get_settings
from imageresizer.s3 import get_object_store
from imageresizer.service import iter_event_objects, resize_source_object

if TYPE_CHECKING:
    from imageresizer.s3 import ObjectStore

logger = logging.getLogger()
logger.setLevel(get_settings().log_level)


def handler(event: dict, context: object) -> dict:
    """Lambda entry point — processes S3 image upload events."""
    return handle_resize(event, get_object_store(), get_settings())


def handle_resize(event: dict, store: ObjectStore, settings: Settings) -> dict:
    logger.info("Event received: %s", json.dumps(event))
    results = []
    try:
        for bucket, key in iter_event_objects(event):
            result = resize_source_object(bucket, key, store, settings)
            results.append(result.to_body())
    except Exception:
        logger.exception("Error processing image")
        raise

    return {"statusCode": 200, "results": results}

"""
AWS Lambda handler — Signed URL

Invoked by API Gateway (proxy integration) for GET /get-url?key=...

In "pair" mode (default) one presigned GET URL per target size is returned as
url1, url2, ... and any width/height parameters are ignored. In "single" mode
width/height select one variant; without them the key is signed as given.
Signing never checks that the object exists.

Environment variables:
  RESIZED_BUCKET      — S3 bucket holding the resized variants
  URL_MODE            — "pair" or "single"
  URL_EXPIRY_SECONDS  — presigned URL lifetime (default 3600)
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from imageresizer.config import Settings, get_settings
from imageresizer.constants import JSON_HEADERS
from imageresizer.exceptions import BadRequest
from imageresizer.lambdas.responses import error_response, json_response
from imageresizer.s3 import get_object_store
from imageresizer.service import parse_url_query, signed_urls

if TYPE_CHECKING:
    from imageresizer.s3 import ObjectStore

logger = logging.getLogger()
logger.setLevel(get_settings().log_level)


def handler(event: dict, context: object) -> dict:
    """Lambda entry point — returns presigned URLs for resized variants."""
    return handle_get_url(event, get_object_store(), get_settings())


def handle_get_url(event: dict, store: ObjectStore, settings: Settings) -> dict:
    try:
        params = event.get("queryStringParameters") or {}
        logger.info("Key: %s", params.get("key"))
        query = parse_url_query(params, settings)
        result = signed_urls(query, store, settings)
        return json_response(200, JSON_HEADERS, result.to_body())

    except BadRequest as exc:
        return error_response(exc, JSON_HEADERS, "Error generating pre-signed URL")
    except Exception as exc:
        logger.exception("Error generating pre-signed URL")
        return error_response(exc, JSON_HEADERS, "Error generating pre-signed URL")

"""
AWS Lambda handler — Image Upload

Invoked by API Gateway (proxy integration) for POST /upload.

Flow:
  1. OPTIONS preflight short-circuits with 200 and an empty body.
  2. Validates the JSON body: filename, contentType, base64Image.
  3. Rejects unsupported content types and payloads over the size limit.
  4. Writes the decoded image to the source bucket as {epoch-ms}-{filename}.
  5. The S3 ObjectCreated notification then triggers the resize Lambda.

Environment variables:
  SOURCE_BUCKET  — S3 bucket for original uploads
  AWS_REGION     — AWS region (set by Lambda runtime)
"""
from __future__ import annotations

import base64
import binascii
import logging
from typing import TYPE_CHECKING

from imageresizer.config import Settings, get_settings
from imageresizer.constants import UPLOAD_HEADERS
from imageresizer.exceptions import BadRequest, InvalidJsonBody
from imageresizer.lambdas.responses import error_response, json_response
from imageresizer.s3 import get_object_store
from imageresizer.service import parse_upload_request, store_upload

if TYPE_CHECKING:
    from imageresizer.s3 import ObjectStore

logger = logging.getLogger()
logger.setLevel(get_settings().log_level)


def handler(event: dict, context: object) -> dict:
    """Lambda entry point — stores one uploaded image."""
    return handle_upload(event, get_object_store(), get_settings())


def handle_upload(event: dict, store: ObjectStore, settings: Settings) -> dict:
    logger.info("Processing upload event")
    try:
        if event.get("httpMethod") == "OPTIONS":
            return json_response(200, UPLOAD_HEADERS, "")

        body = event.get("body")
        if body and event.get("isBase64Encoded"):
            try:
                body = base64.b64decode(body)
            except (binascii.Error, ValueError):
                raise InvalidJsonBody()
        request = parse_upload_request(body)
        result = store_upload(request, store, settings)
        return json_response(200, UPLOAD_HEADERS, result.to_body())

    except BadRequest as exc:
        logger.warning("Rejected upload: %s", exc.message)
        return error_response(exc, UPLOAD_HEADERS, "Error uploading image")
    except Exception as exc:
        logger.exception("Error uploading image")
        return error_response(exc, UPLOAD_HEADERS, "Error uploading image")

"""API Gateway proxy-integration response helpers."""
from __future__ import annotations

import json
from typing import Any

from imageresizer.exceptions import ImageResizerError, error_message


def json_response(status_code: int, headers: dict[str, str], body: Any) -> dict:
    return {
        "statusCode": int(status_code),
        "headers": dict(headers),
        "body": body if isinstance(body, str) else json.dumps(body),
    }


def error_response(
    exc: BaseException,
    headers: dict[str, str],
    message: str,
) -> dict:
    """Translate an exception into a ``{message[, error]}`` response.

    Validation failures carry their own message; everything else is reported
    as ``message`` plus the underlying ``error``.
    """
    if isinstance(exc, ImageResizerError):
        status_code = int(exc.status_code)
        if status_code < 500:
            return json_response(status_code, headers, {"message": exc.message})
    else:
        status_code = 500
    return json_response(
        status_code, headers, {"message": message, "error": error_message(exc)},
    )

import logging
from collections.abc import Awaitable, Callable

from fastapi import Request, status
from fastapi.responses import JSONResponse, Response

from imageresizer.exceptions import ImageResizerError, error_message

logger = logging.getLogger(__name__)

# Message reported for 5xx responses, keyed by path
_FAILURE_MESSAGES = {
    "/upload": "Error uploading image",
    "/get-url": "Error generating pre-signed URL",
}


def _request_id(request: Request) -> str | None:
    return getattr(request.state, "request_id", None)


def failure_message(request: Request) -> str:
    return _FAILURE_MESSAGES.get(request.url.path, "An unexpected error occurred")


def error_body(request: Request, exc: BaseException) -> tuple[int, dict]:
    """Status code and ``{message[, error]}`` body for an exception."""
    if isinstance(exc, ImageResizerError) and exc.status_code < 500:
        return int(exc.status_code), {"message": exc.message}
    status_code = (
        int(exc.status_code)
        if isinstance(exc, ImageResizerError)
        else status.HTTP_500_INTERNAL_SERVER_ERROR
    )
    return status_code, {"message": failure_message(request), "error": error_message(exc)}


async def image_resizer_error_handler(request: Request, exc: ImageResizerError) -> JSONResponse:
    status_code, body = error_body(request, exc)
    if status_code >= 500:
        logger.error(
            "%s %s failed [request_id=%s]: %s",
            request.method, request.url.path, _request_id(request), exc.message,
        )
    return JSONResponse(status_code=status_code, content=body)


async def error_envelope_middleware(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    try:
        return await call_next(request)
    except Exception as exc:
        logger.exception("Unhandled exception [request_id=%s]", _request_id(request))
        status_code, body = error_body(request, exc)
        return JSONResponse(status_code=status_code, content=body)

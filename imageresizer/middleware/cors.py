from collections.abc import Awaitable, Callable

from starlette.requests import Request
from starlette.responses import Response

Middleware = Callable[[Request, Callable[[Request], Awaitable[Response]]], Awaitable[Response]]


def wildcard_origin_middleware(origins: list[str]) -> Middleware:
    """Send ``Access-Control-Allow-Origin: *`` even when the request has no Origin.

    CORSMiddleware only adds the header for cross-origin requests. The Lambda
    responses always carry it, so the gateway does the same when ``*`` is allowed.
    """

    async def middleware(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        response = await call_next(request)
        if "*" in origins:
            response.headers.setdefault("Access-Control-Allow-Origin", "*")
        return response

    return middleware

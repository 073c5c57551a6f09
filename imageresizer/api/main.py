import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from imageresizer import __version__
from imageresizer.api.router import router as image_router
from imageresizer.config import Settings, get_settings
from imageresizer.exceptions import ImageResizerError
from imageresizer.middleware import (
    error_envelope_middleware,
    request_id_middleware,
    wildcard_origin_middleware,
)
from imageresizer.middleware.error_handler import image_resizer_error_handler
from imageresizer.schemas import HealthResponse


# ── OpenAPI metadata ──────────────────────────────────────────────────────────

_DESCRIPTION = """
## Image Resizer — local gateway

Serves the same HTTP contract as the API Gateway + Lambda deployment.

* **Upload** — `POST /upload` with a base64 image; stored in the source bucket.
* **Resize** — driven by the S3 notification in AWS; optionally run inline
  after each upload when `INLINE_RESIZE=true`.
* **Signed URLs** — `GET /get-url?key=...` returns presigned GET URLs for the
  resized variants.

### Error shape
```json
{ "message": "Human-readable message", "error": "detail (5xx only)" }
```
"""

_TAGS_METADATA = [
    {
        "name": "images",
        "description": "Upload images and fetch presigned URLs for resized variants.",
    },
]


# ── App factory ───────────────────────────────────────────────────────────────

def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(levelname)s:%(name)s: %(message)s",
    )

    app = FastAPI(
        title="Image Resizer",
        version=__version__,
        description=_DESCRIPTION,
        openapi_tags=_TAGS_METADATA,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.add_exception_handler(ImageResizerError, image_resizer_error_handler)

    # Middleware (applied in reverse-registration order: last added = outermost)
    app.middleware("http")(request_id_middleware)
    app.middleware("http")(error_envelope_middleware)
    app.middleware("http")(wildcard_origin_middleware(settings.cors_origins_list))
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
        max_age=600,
    )

    app.include_router(image_router)

    @app.get("/health", response_model=HealthResponse, tags=["health"])
    async def health() -> HealthResponse:
        return HealthResponse(status="ok", service="image-resizer")

    return app


app = create_app()

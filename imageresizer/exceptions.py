"""
Image resizer — domain exceptions.

All exceptions use preset status codes and messages so that callers never
need to specify these at the call site. The Lambda entry points and the local
gateway translate them into the JSON error body ``{"message": ...}``.
"""
from http import HTTPStatus


class ImageResizerError(Exception):
    status_code: int = HTTPStatus.INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


# ── Request validation ───────────────────────────────────────────────────────

class BadRequest(ImageResizerError):
    status_code = HTTPStatus.BAD_REQUEST


class MissingBody(BadRequest):
    def __init__(self) -> None:
        super().__init__("No body provided")


class InvalidJsonBody(BadRequest):
    def __init__(self) -> None:
        super().__init__("Request body must be a JSON object")


class MissingUploadFields(BadRequest):
    def __init__(self) -> None:
        super().__init__(
            "Missing required fields: filename, contentType, or base64Image",
        )


class UnsupportedImageType(BadRequest):
    def __init__(self) -> None:
        super().__init__("Invalid image type. Supported types: JPEG, PNG, GIF, WebP")


class ImageTooLarge(BadRequest):
    def __init__(self, max_mb: int) -> None:
        super().__init__(f"File size exceeds {max_mb}MB limit")


class InvalidImageData(BadRequest):
    def __init__(self) -> None:
        super().__init__("Invalid base64 image data")


class MissingKeyParameter(BadRequest):
    def __init__(self) -> None:
        super().__init__("Missing required parameter: key")


class InvalidDimensions(BadRequest):
    def __init__(self) -> None:
        super().__init__("width and height must be positive integers")


# ── Storage ──────────────────────────────────────────────────────────────────

class StorageReadError(ImageResizerError):
    def __init__(self, bucket: str, key: str, message: str | None = None) -> None:
        super().__init__(message or f"Could not read s3://{bucket}/{key}")
        self.bucket = bucket
        self.key = key


class EmptyObjectBody(StorageReadError):
    def __init__(self, bucket: str, key: str) -> None:
        super().__init__(bucket, key, "No image body received")


class StorageWriteError(ImageResizerError):
    def __init__(self, bucket: str, key: str, message: str | None = None) -> None:
        super().__init__(message or f"Could not write s3://{bucket}/{key}")
        self.bucket = bucket
        self.key = key


def error_message(exc: BaseException) -> str:
    """Best-effort human-readable message for an arbitrary exception."""
    if isinstance(exc, ImageResizerError):
        return exc.message
    return str(exc) or "Unknown error"

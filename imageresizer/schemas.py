"""
Image resizer — Pydantic V2 request/response schemas.

Wire names are camelCase (``contentType``, ``expiresIn``); Python attributes
are snake_case.
"""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


# ── Base ─────────────────────────────────────────────────────────────────────

class _Base(BaseModel):
    model_config = ConfigDict(
        populate_by_name=True,
        extra="forbid",
    )

    def to_body(self) -> dict:
        return self.model_dump(by_alias=True)


# ── Requests ─────────────────────────────────────────────────────────────────

class UploadRequest(_Base):
    """Body of ``POST /upload``. Extra fields such as ``sizes`` are ignored."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    filename: str = Field(min_length=1)
    content_type: str = Field(alias="contentType", min_length=1)
    base64_image: str = Field(alias="base64Image", min_length=1)


class SignedUrlQuery(_Base):
    """Query string of ``GET /get-url``."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    key: str = Field(min_length=1)
    width: int | None = Field(default=None, gt=0)
    height: int | None = Field(default=None, gt=0)


# ── Responses ────────────────────────────────────────────────────────────────

class UploadResponse(_Base):
    message: str = "Image uploaded successfully"
    filename: str = Field(description="Generated source object key")
    url: str = Field(description="Public URL of the source object")


class SignedUrlResponse(_Base):
    """A single presigned GET URL."""
    url: str
    expires_in: int = Field(alias="expiresIn", description="URL expiry in seconds")


class SignedUrlSetResponse(_Base):
    """One presigned GET URL per target size, serialized as url1, url2, ..."""
    urls: list[str]
    expires_in: int = Field(alias="expiresIn", description="URL expiry in seconds")

    def to_body(self) -> dict:
        body: dict = {f"url{i}": url for i, url in enumerate(self.urls, start=1)}
        body["expiresIn"] = self.expires_in
        return body


class ResizeResult(_Base):
    """Variants written for one source object."""
    key: str
    variants: list[str]


class HealthResponse(_Base):
    status: str
    service: str

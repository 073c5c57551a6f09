from functools import lru_cache
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from imageresizer.constants import ImageSize, parse_sizes


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── AWS ───────────────────────────────────────────────────────────────────
    aws_access_key_id: str = ""
    aws_secret_access_key: str = ""
    aws_session_token: str = ""  # set by the Lambda runtime for role credentials
    aws_region: str = "us-east-1"
    source_bucket: str = "image-resizer-source-dev"
    resized_bucket: str = "image-resizer-resized-dev"

    # ── Upload ────────────────────────────────────────────────────────────────
    max_upload_bytes: int = 5 * 1024 * 1024  # 5 MiB decoded
    allowed_content_types: str = "image/jpeg,image/png,image/gif,image/webp"

    # ── Resize ────────────────────────────────────────────────────────────────
    target_sizes: str = "200x200,800x600"

    # ── Signed URLs ───────────────────────────────────────────────────────────
    url_expiry_seconds: int = 3600
    url_mode: Literal["pair", "single"] = "pair"  # "pair" signs every target size

    # ── Local gateway ─────────────────────────────────────────────────────────
    inline_resize: bool = False
    cors_origins: str = "*"
    log_level: str = "INFO"

    @field_validator("target_sizes")
    @classmethod
    def _validate_target_sizes(cls, value: str) -> str:
        if not parse_sizes(value):
            raise ValueError("At least one target size is required")
        return value

    @property
    def allowed_content_types_set(self) -> frozenset[str]:
        return frozenset(
            x.strip() for x in self.allowed_content_types.split(",") if x.strip()
        )

    @property
    def target_size_list(self) -> list[ImageSize]:
        return parse_sizes(self.target_sizes)

    @property
    def cors_origins_list(self) -> list[str]:
        return [x.strip() for x in self.cors_origins.split(",") if x.strip()]


@lru_cache
def get_settings() -> Settings:
    return Settings()

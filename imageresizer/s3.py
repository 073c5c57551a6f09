"""
AWS S3 utilities — object reads/writes and presigned GET URLs.

Upload flow:
  1. Client posts a base64 image to the upload endpoint.
  2. The image is written to the source bucket as ``{epoch-ms}-{filename}``.
  3. The S3 ObjectCreated notification triggers the resize Lambda.
  4. Variants land in the resized bucket as ``{w}x{h}/{source-key}``.
  5. Clients fetch presigned GET URLs for the variants.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from imageresizer.config import Settings, get_settings
from imageresizer.exceptions import EmptyObjectBody, StorageReadError, StorageWriteError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoredObject:
    body: bytes
    content_type: str | None = None
    metadata: dict[str, str] = field(default_factory=dict)


def _error_code(exc: ClientError) -> str:
    return exc.response.get("Error", {}).get("Code", "")


def create_s3_client(settings: Settings) -> Any:
    """Build a boto3 S3 client. Empty credentials fall back to the default chain."""
    return boto3.client(
        "s3",
        region_name=settings.aws_region,
        aws_access_key_id=settings.aws_access_key_id or None,
        aws_secret_access_key=settings.aws_secret_access_key or None,
        aws_session_token=settings.aws_session_token or None,
        config=Config(signature_version="s3v4"),
    )


class ObjectStore:
    """Thin wrapper over a boto3 S3 client.

    botocore failures are translated into StorageReadError / StorageWriteError
    so handlers only ever see the service's exception taxonomy.
    """

    def __init__(self, client: Any, region: str) -> None:
        self._client = client
        self._region = region

    @classmethod
    def from_settings(cls, settings: Settings) -> ObjectStore:
        return cls(create_s3_client(settings), settings.aws_region)

    def put_object(
        self,
        bucket: str,
        key: str,
        body: bytes,
        *,
        content_type: str | None = None,
        metadata: dict[str, str] | None = None,
    ) -> None:
        params: dict[str, Any] = {"Bucket": bucket, "Key": key, "Body": body}
        if content_type:
            params["ContentType"] = content_type
        if metadata:
            params["Metadata"] = metadata
        try:
            self._client.put_object(**params)
        except ClientError as exc:
            raise StorageWriteError(
                bucket, key, f"Could not write s3://{bucket}/{key}: {_error_code(exc)}",
            ) from exc
        except BotoCoreError as exc:
            raise StorageWriteError(bucket, key) from exc
        logger.info("Wrote s3://%s/%s (%d bytes)", bucket, key, len(body))

    def get_object(self, bucket: str, key: str) -> StoredObject:
        """Read an object fully into memory.

        Raises:
            EmptyObjectBody:  the object exists but has no payload.
            StorageReadError: the key does not exist or S3 could not be reached.
        """
        try:
            response = self._client.get_object(Bucket=bucket, Key=key)
            body = response["Body"].read() if response.get("Body") is not None else b""
        except ClientError as exc:
            code = _error_code(exc)
            if code in ("404", "NoSuchKey"):
                raise StorageReadError(
                    bucket, key, f"Object not found: s3://{bucket}/{key}",
                ) from exc
            raise StorageReadError(
                bucket, key, f"Could not read s3://{bucket}/{key}: {code}",
            ) from exc
        except BotoCoreError as exc:
            raise StorageReadError(bucket, key) from exc

        if not body:
            raise EmptyObjectBody(bucket, key)
        return StoredObject(
            body=body,
            content_type=response.get("ContentType"),
            metadata=response.get("Metadata") or {},
        )

    def presigned_get_url(self, bucket: str, key: str, expires_in: int) -> str:
        """Return a presigned GET URL. Signing never checks that the key exists."""
        return self._client.generate_presigned_url(
            "get_object",
            Params={"Bucket": bucket, "Key": key},
            ExpiresIn=expires_in,
        )

    def public_url(self, bucket: str, key: str) -> str:
        return f"https://{bucket}.s3.{self._region}.amazonaws.com/{key}"


@lru_cache
def get_object_store() -> ObjectStore:
    """Process-wide store, reused across warm Lambda invocations."""
    return ObjectStore.from_settings(get_settings())

from collections.abc import Generator

import pytest

from fakes import REGION, RESIZED_BUCKET, SOURCE_BUCKET, FakeS3Client
from imageresizer.config import Settings
from imageresizer.s3 import ObjectStore


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        source_bucket=SOURCE_BUCKET,
        resized_bucket=RESIZED_BUCKET,
        aws_region=REGION,
        aws_access_key_id="testing",
        aws_secret_access_key="testing",
    )


@pytest.fixture
def s3_client() -> FakeS3Client:
    return FakeS3Client()


@pytest.fixture
def store(s3_client: FakeS3Client) -> Generator[ObjectStore, None, None]:
    yield ObjectStore(s3_client, REGION)

import base64
import logging
from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient

from fakes import RESIZED_BUCKET, SOURCE_BUCKET, FakeS3Client, image_size, make_image
from imageresizer.api import router as router_module
from imageresizer.api.main import create_app


def _client(store, settings) -> TestClient:
    app = create_app(settings)
    app.dependency_overrides[router_module._get_store] = lambda: store
    app.dependency_overrides[router_module._get_settings] = lambda: settings
    return TestClient(app)


@pytest.fixture
def client(store, settings) -> Generator[TestClient, None, None]:
    with _client(store, settings) as c:
        yield c


def _upload_body(data: bytes, **overrides) -> dict:
    body = {
        "filename": "photo.jpg",
        "contentType": "image/jpeg",
        "base64Image": base64.b64encode(data).decode(),
    }
    body.update(overrides)
    return body


def test_health(client: TestClient) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "service": "image-resizer"}


def test_upload(client: TestClient, s3_client: FakeS3Client) -> None:
    data = make_image()
    response = client.post("/upload", json=_upload_body(data))

    assert response.status_code == 200
    body = response.json()
    assert body["filename"].endswith("-photo.jpg")
    assert s3_client.objects[(SOURCE_BUCKET, body["filename"])]["Body"] == data
    # No notification wiring locally unless inline resize is enabled
    assert not any(bucket == RESIZED_BUCKET for bucket, _ in s3_client.objects)


def test_upload_without_body(client: TestClient) -> None:
    response = client.post("/upload")
    assert response.status_code == 400
    assert response.json() == {"message": "No body provided"}


def test_upload_rejects_unsupported_type(client: TestClient) -> None:
    response = client.post(
        "/upload", json=_upload_body(make_image(), contentType="application/pdf"),
    )
    assert response.status_code == 400
    assert response.json()["message"].startswith("Invalid image type")


def test_upload_storage_failure(client: TestClient, s3_client: FakeS3Client, monkeypatch) -> None:
    monkeypatch.setattr("imageresizer.service.build_source_key", lambda filename: "1-photo.jpg")
    s3_client.failing_keys.add("1-photo.jpg")

    response = client.post("/upload", json=_upload_body(make_image()))

    assert response.status_code == 500
    body = response.json()
    assert body["message"] == "Error uploading image"
    assert "AccessDenied" in body["error"]


def test_upload_preflight(client: TestClient) -> None:
    response = client.options("/upload")
    assert response.status_code == 200
    assert response.content == b""


def test_cors_header_on_responses(client: TestClient) -> None:
    response = client.get(
        "/get-url", params={"key": "k.jpg"}, headers={"Origin": "http://localhost:3000"},
    )
    assert response.headers["access-control-allow-origin"] == "*"


def test_request_id_is_echoed(client: TestClient) -> None:
    response = client.get("/health", headers={"X-Request-ID": "abc123"})
    assert response.headers["X-Request-ID"] == "abc123"


def test_request_id_is_logged_on_failure(
    client: TestClient, s3_client: FakeS3Client, monkeypatch, caplog
) -> None:
    monkeypatch.setattr("imageresizer.service.build_source_key", lambda filename: "1-photo.jpg")
    s3_client.failing_keys.add("1-photo.jpg")

    with caplog.at_level(logging.ERROR, logger="imageresizer.middleware.error_handler"):
        response = client.post(
            "/upload", json=_upload_body(make_image()), headers={"X-Request-ID": "req-42"},
        )

    assert response.status_code == 500
    assert response.headers["X-Request-ID"] == "req-42"
    assert any("request_id=req-42" in record.getMessage() for record in caplog.records)


def test_cors_header_without_origin(client: TestClient) -> None:
    assert client.get("/health").headers["access-control-allow-origin"] == "*"
    response = client.get("/get-url")
    assert response.status_code == 400
    assert response.headers["access-control-allow-origin"] == "*"


def test_no_wildcard_header_for_restricted_origins(store, settings) -> None:
    settings = settings.model_copy(update={"cors_origins": "http://localhost:3000"})
    with _client(store, settings) as client:
        response = client.get("/health")
    assert "access-control-allow-origin" not in response.headers


def test_get_url_pair(client: TestClient) -> None:
    response = client.get("/get-url", params={"key": "1-photo.jpg"})
    assert response.status_code == 200
    body = response.json()
    assert "200x200/1-photo.jpg" in body["url1"]
    assert "800x600/1-photo.jpg" in body["url2"]
    assert body["expiresIn"] == 3600


def test_get_url_missing_key(client: TestClient) -> None:
    response = client.get("/get-url")
    assert response.status_code == 400
    assert response.json() == {"message": "Missing required parameter: key"}


def test_get_url_single_mode(store, settings) -> None:
    settings = settings.model_copy(update={"url_mode": "single"})
    with _client(store, settings) as client:
        response = client.get(
            "/get-url", params={"key": "1-photo.jpg", "width": 200, "height": 200},
        )
    assert response.status_code == 200
    assert set(response.json()) == {"url", "expiresIn"}
    assert "/200x200/1-photo.jpg" in response.json()["url"]


def test_inline_resize_after_upload(store, s3_client: FakeS3Client, settings) -> None:
    settings = settings.model_copy(update={"inline_resize": True})
    with _client(store, settings) as client:
        response = client.post("/upload", json=_upload_body(make_image("JPEG", (1600, 1200))))

    key = response.json()["filename"]
    assert image_size(s3_client.objects[(RESIZED_BUCKET, f"200x200/{key}")]["Body"]) == (200, 150)
    assert image_size(s3_client.objects[(RESIZED_BUCKET, f"800x600/{key}")]["Body"]) == (800, 600)

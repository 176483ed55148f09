# tests/test_api.py
"""Tests for the conversion API (FastAPI TestClient, in-process)."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from bookdigest import __version__
from bookdigest.api.app import create_app
from bookdigest.api.error_handlers import handle_api_errors
from bookdigest.api.routes import convert
from bookdigest.core.exceptions import ConfigurationError, IngestionError

pytestmark = pytest.mark.tier2


@pytest.fixture
def client():
    return TestClient(create_app())


def upload(client, name, data, content_type="application/epub+zip"):
    return client.post("/convertEpubToChapters", files={"file": (name, data, content_type)})


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ok"
        assert body["time"].endswith("+00:00")

    def test_openapi_version(self, client):
        assert client.get("/openapi.json").json()["info"]["version"] == __version__


class TestConvert:
    def test_converts_epub(self, client, sample_epub):
        response = upload(client, "sample.epub", sample_epub.read_bytes())

        assert response.status_code == 200
        body = response.json()
        assert body["toc"] == ["Chapter 1", "Chapter 2", "Chapter 3"]
        assert body["chapters"][0] == "Chapter 1\nIshmael goes to sea."

    def test_uppercase_extension_accepted(self, client, sample_epub):
        assert upload(client, "SAMPLE.EPUB", sample_epub.read_bytes()).status_code == 200

    def test_rejects_other_file_types(self, client):
        response = upload(client, "book.pdf", b"%PDF-1.7", "application/pdf")

        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid file type, only .epub files are allowed"

    def test_rejects_large_files(self, client, sample_epub, monkeypatch):
        monkeypatch.setattr(convert, "MAX_UPLOAD_BYTES", 16)

        response = upload(client, "sample.epub", sample_epub.read_bytes())

        assert response.status_code == 400
        assert response.json()["detail"] == "File too large"

    def test_invalid_epub(self, client):
        response = upload(client, "broken.epub", b"not a zip at all")

        assert response.status_code == 400
        assert "Invalid EPUB" in response.json()["detail"]

    def test_missing_file_field(self, client):
        response = client.post("/convertEpubToChapters")

        assert response.status_code == 422


class TestErrorHandler:
    """handle_api_errors maps domain errors onto status codes."""

    @pytest.fixture
    def failing_client(self):
        app = FastAPI()

        @app.get("/fail/{kind}")
        @handle_api_errors
        async def fail(kind: str):
            errors = {
                "ingestion": IngestionError("bad book"),
                "value": ValueError("bad value"),
                "config": ConfigurationError("no key"),
                "boom": RuntimeError("kaboom"),
            }
            raise errors[kind]

        return TestClient(app)

    @pytest.mark.parametrize(
        "kind,status,detail",
        [
            ("ingestion", 400, "bad book"),
            ("value", 400, "bad value"),
            ("config", 500, "no key"),
            ("boom", 500, "Internal server error"),
        ],
    )
    def test_mapping(self, failing_client, kind, status, detail):
        response = failing_client.get(f"/fail/{kind}")

        assert response.status_code == status
        assert response.json()["detail"] == detail

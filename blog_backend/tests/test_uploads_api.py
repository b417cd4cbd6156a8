import io
import os
import re

import pytest
from fastapi import FastAPI, File, UploadFile
from fastapi.testclient import TestClient

from blog_backend.errors import PayloadTooLarge
from blog_backend.main import app
from blog_backend.uploads import (
    UploadSizeLimitMiddleware,
    UploadStore,
    generate_filename,
    get_upload_store,
)

GENERATED_NAME = re.compile(r"^\d{13,}-[0-9a-f]{16}(\.[A-Za-z0-9]+)?$")


class RecordingStore(UploadStore):
    """UploadStore that counts how often it is asked to write."""

    def __init__(self, directory, max_bytes):
        super().__init__(directory, max_bytes)
        self.saves = 0

    def save(self, source, original_filename):
        self.saves += 1
        return super().save(source, original_filename)


class TestUploadEndpoint:
    def test_upload_returns_public_url_and_serves_bytes(self, client, auth_headers, upload_dir):
        data = bytes(range(256)) * 64
        res = client.post(
            "/api/upload",
            files={"file": ("diagram.png", data, "image/png")},
            headers=auth_headers,
        )
        assert res.status_code == 200
        body = res.json()
        assert body["url"].startswith("/uploads/")
        assert body["filename"] == "diagram.png"
        assert body["originalFilename"] == "diagram.png"

        stored_name = body["url"][len("/uploads/"):]
        assert GENERATED_NAME.match(stored_name)
        assert stored_name.endswith(".png")
        assert os.path.exists(os.path.join(upload_dir, stored_name))

        served = client.get(body["url"])
        assert served.status_code == 200
        assert served.content == data

    def test_two_uploads_of_same_name_do_not_collide(self, client, auth_headers):
        urls = set()
        for payload in (b"first", b"second"):
            res = client.post(
                "/api/upload",
                files={"file": ("same.txt", payload, "text/plain")},
                headers=auth_headers,
            )
            assert res.status_code == 200
            urls.add(res.json()["url"])
        assert len(urls) == 2

    def test_upload_without_file_is_400(self, client, auth_headers):
        res = client.post("/api/upload", data={"note": "no file"}, headers=auth_headers)
        assert res.status_code == 400
        assert res.json() == {"msg": "No file uploaded"}

    def test_upload_over_limit_fails_and_keeps_nothing(self, client, auth_headers, tmp_path):
        app.dependency_overrides[get_upload_store] = lambda: UploadStore(str(tmp_path), max_bytes=16)
        res = client.post(
            "/api/upload",
            files={"file": ("big.bin", b"x" * 17, "application/octet-stream")},
            headers=auth_headers,
        )
        assert res.status_code == 413
        assert "too large" in res.json()["msg"]
        assert os.listdir(tmp_path) == []

    def test_declared_oversize_is_refused_before_reaching_store(self, client, auth_headers, tmp_path):
        store = RecordingStore(str(tmp_path), max_bytes=10 * 1024 * 1024)
        app.dependency_overrides[get_upload_store] = lambda: store
        res = client.post(
            "/api/upload",
            files={"file": ("big.bin", b"x" * 32, "application/octet-stream")},
            headers={**auth_headers, "Content-Length": str(40 * 1024 * 1024)},
        )
        assert res.status_code == 413
        assert "too large" in res.json()["msg"]
        assert store.saves == 0
        assert os.listdir(tmp_path) == []

    def test_upload_within_declared_limit_reaches_store(self, client, auth_headers, tmp_path):
        store = RecordingStore(str(tmp_path), max_bytes=10 * 1024 * 1024)
        app.dependency_overrides[get_upload_store] = lambda: store
        res = client.post(
            "/api/upload",
            files={"file": ("small.bin", b"x" * 32, "application/octet-stream")},
            headers=auth_headers,
        )
        assert res.status_code == 200
        assert store.saves == 1

    def test_missing_upload_is_json_404(self, client):
        res = client.get("/uploads/does-not-exist.png")
        assert res.status_code == 404
        assert res.json() == {"msg": "API Not Found"}


class TestUploadStore:
    def test_generate_filename_keeps_extension(self):
        assert GENERATED_NAME.match(generate_filename("photo.JPG"))
        assert generate_filename("photo.JPG").endswith(".JPG")
        assert generate_filename("archive.tar.gz").endswith(".gz")

    def test_generate_filename_without_extension(self):
        name = generate_filename("README")
        assert GENERATED_NAME.match(name)
        assert "." not in name

    def test_generate_filename_ignores_client_directories(self):
        name = generate_filename("../../etc/passwd.txt")
        assert "/" not in name
        assert name.endswith(".txt")

    def test_save_at_exact_limit(self, tmp_path):
        store = UploadStore(str(tmp_path), max_bytes=8)
        stored = store.save(io.BytesIO(b"12345678"), "eight.bin")
        assert stored.size == 8
        assert stored.original_filename == "eight.bin"
        assert stored.url == f"/uploads/{stored.filename}"
        assert (tmp_path / stored.filename).read_bytes() == b"12345678"

    def test_save_over_limit_removes_partial_file(self, tmp_path):
        store = UploadStore(str(tmp_path), max_bytes=100 * 1024)
        with pytest.raises(PayloadTooLarge):
            store.save(io.BytesIO(b"y" * (200 * 1024)), "huge.bin")
        assert list(tmp_path.iterdir()) == []


class TestUploadSizeLimitMiddleware:
    @pytest.fixture
    def limited_client(self):
        received = []
        small_app = FastAPI()
        small_app.add_middleware(UploadSizeLimitMiddleware, path="/upload", max_bytes=16, overhead=0)

        @small_app.post("/upload")
        def upload(file: UploadFile = File(...)):
            received.append(file.filename)
            return {"ok": True}

        @small_app.post("/other")
        def other():
            return {"ok": True}

        return TestClient(small_app), received

    def test_body_over_limit_is_refused_unread(self, limited_client):
        client, received = limited_client
        res = client.post("/upload", files={"file": ("a.bin", b"z" * 1024, "application/octet-stream")})
        assert res.status_code == 413
        assert res.json() == {"msg": "File too large (limit 16 bytes)"}
        assert received == []

    def test_other_paths_are_not_limited(self, limited_client):
        client, _ = limited_client
        res = client.post("/other", content=b"z" * 1024, headers={"Content-Type": "application/octet-stream"})
        assert res.status_code == 200

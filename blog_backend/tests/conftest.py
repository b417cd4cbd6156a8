import os
import tempfile

import pytest
from fastapi.testclient import TestClient

# Point all storage at a throwaway directory before the app is imported
_RUNTIME_DIR = tempfile.mkdtemp(prefix="blog-backend-tests-")
os.environ["PERSISTENCE_BACKEND"] = "memory"
os.environ["DATA_DIR"] = os.path.join(_RUNTIME_DIR, "data")
os.environ["UPLOAD_DIR"] = os.path.join(_RUNTIME_DIR, "uploads")
os.environ["PUBLIC_DIR"] = os.path.join(_RUNTIME_DIR, "public")
os.environ["ADMIN_PASSWORD"] = "666"
os.environ["JWT_SECRET"] = "test-secret"
os.environ.pop("POSTS_FILE", None)
os.environ.pop("MAX_UPLOAD_BYTES", None)

from blog_backend.main import app  # noqa: E402
from blog_backend.repositories import InMemoryRepository, get_repository  # noqa: E402

ADMIN_PASSWORD = "666"


@pytest.fixture
def repo():
    return InMemoryRepository()


@pytest.fixture
def client(repo):
    app.dependency_overrides[get_repository] = lambda: repo
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def token(client):
    res = client.post("/api/login", json={"password": ADMIN_PASSWORD})
    assert res.status_code == 200
    return res.json()["token"]


@pytest.fixture
def auth_headers(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def upload_dir():
    return os.environ["UPLOAD_DIR"]


@pytest.fixture
def public_dir():
    return os.environ["PUBLIC_DIR"]

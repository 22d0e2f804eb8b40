import os
import tempfile

import pytest
from fastapi.testclient import TestClient

os.environ["DATA_DIR"] = tempfile.mkdtemp(prefix="mediavault-test-")
os.environ["JWT_SECRET"] = "test-secret"
os.environ["ENVIRONMENT"] = "test"
os.environ["SWEEP_ORPHANS_ON_STARTUP"] = "false"

from mediavault.core.config import get_settings
from mediavault.main import create_app


@pytest.fixture(autouse=True)
def settings(tmp_path, monkeypatch):
    monkeypatch.setenv("DATA_DIR", str(tmp_path / "data"))
    get_settings.cache_clear()
    yield get_settings()
    get_settings.cache_clear()


@pytest.fixture()
def client(settings):
    app = create_app()
    with TestClient(app) as test_client:
        yield test_client


def auth_headers(client, email="user@example.com", password="secret123"):
    response = client.post("/api/register", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    body = response.json()
    return {"Authorization": f"Bearer {body['token']}"}, body["user"]

import io
from datetime import date, timedelta

import pytest
from fastapi.testclient import TestClient

from campusconnect.core.config import Settings
from campusconnect.core.dependencies import get_settings
from campusconnect.core.storage import JsonStore
from campusconnect.main import app
from campusconnect.services.auth_service import AuthService


class FakeUpload:
    """Stand-in for an UploadFile: filename, content_type and a readable file."""

    def __init__(self, filename, content=b"test file contents", content_type=None):
        self.filename = filename
        self.content_type = content_type
        self.file = io.BytesIO(content)


@pytest.fixture
def settings(tmp_path):
    return Settings(
        DATA_DIR=str(tmp_path / "data"),
        UPLOAD_DIR=str(tmp_path / "uploads"),
        JWT_SECRET="test-secret",
        BCRYPT_ROUNDS=4,
        TIMEZONE="UTC",
        ALLOW_ADMIN_REGISTRATION=True,
        COUNT_MATERIAL_VIEWS=False,
    )


@pytest.fixture
def store(settings):
    store = JsonStore(settings.DATA_DIR)
    store.ensure_layout()
    return store


@pytest.fixture
def auth(store, settings):
    return AuthService(store, settings)


@pytest.fixture
def make_user(auth):
    """Register an account and return the request identity for it."""
    counter = {"n": 0}

    def _make(role="student", name=None, **extra):
        counter["n"] += 1
        payload = {
            "name": name or f"{role.title()} {counter['n']}",
            "email": f"{role}{counter['n']}@example.com",
            "password": "secret123",
            "role": role,
            "department": "CSE",
        }
        if role == "student":
            payload["semester"] = 3
        if role == "faculty":
            payload["employeeId"] = f"EMP{counter['n']:03d}"
        payload.update(extra)
        user, _ = auth.register(payload)
        return {"id": user["id"], "email": user["email"], "name": user["name"], "role": user["role"]}

    return _make


@pytest.fixture
def student(make_user):
    return make_user("student")


@pytest.fixture
def faculty(make_user):
    return make_user("faculty")


@pytest.fixture
def admin(make_user):
    return make_user("admin")


@pytest.fixture
def upload():
    return FakeUpload


@pytest.fixture
def future_date():
    return (date.today() + timedelta(days=30)).isoformat()


@pytest.fixture
def client(settings):
    app.dependency_overrides[get_settings] = lambda: settings
    yield TestClient(app)
    app.dependency_overrides.clear()

"""
Shared fixtures for the Quillpress test suite.

Every test gets a fresh app backed by a SQLite file in its own temp dir.
Run with: pytest tests/ -v

NOTE: pytest is listed under extras_require["dev"] in setup.py.
Install with: pip install -e ".[dev]"
"""

import os
import shutil
import tempfile

import pytest
from flask import Flask

from quillpress import Quillpress
from quillpress.core.database import db


def build_app(db_dir, **overrides):
    """Flask app with every Quillpress module registered."""
    app = Flask(__name__)
    app.config["TESTING"] = True
    app.config["SECRET_KEY"] = "test-secret"
    app.config["DB_DIR"] = db_dir
    app.config["SQLALCHEMY_DATABASE_URI"] = "sqlite:///" + os.path.join(db_dir, "quillpress.db")
    app.config["JWT_SECRET"] = "test-jwt-secret-that-is-long-enough-for-hs256"
    app.config["RECAPTCHA_SECRET_KEY"] = None
    app.config["STORAGE_TYPE"] = "cloud"
    # Log rows go through a second connection; keep SQLite single-writer in tests
    app.config["PERSIST_APP_LOGS"] = False
    app.config.update(overrides)
    Quillpress(app)
    return app


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def tmp_db_dir():
    """Create a temporary directory for test databases, cleaned up after."""
    d = tempfile.mkdtemp(prefix="quillpress-test-")
    yield d
    shutil.rmtree(d, ignore_errors=True)


@pytest.fixture
def app(tmp_db_dir):
    app = build_app(tmp_db_dir)
    yield app
    with app.app_context():
        db.session.remove()
        db.engine.dispose()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def register_user(client):
    """Register an account and return (user dict, auth headers)."""
    def _register(username, email=None, password="secret123", **extra):
        payload = {
            "email": email or f"{username}@quillpress.io",
            "username": username,
            "password": password,
            **extra,
        }
        response = client.post("/api/auth/register", json=payload)
        assert response.status_code == 201, response.get_json()
        data = response.get_json()["data"]
        return data["user"], bearer(data["token"])
    return _register


@pytest.fixture
def admin(register_user):
    """The first account, which is always the admin."""
    return register_user("admin")


@pytest.fixture
def admin_headers(admin):
    return admin[1]


@pytest.fixture
def reader(admin, register_user):
    """A regular (non-admin) account registered after the admin."""
    return register_user("reader")


@pytest.fixture
def create_tag(client, admin_headers):
    def _create(name, **fields):
        response = client.post("/api/tags", json={"name": name, **fields}, headers=admin_headers)
        assert response.status_code == 201, response.get_json()
        return response.get_json()["data"]["tag"]
    return _create


@pytest.fixture
def create_post(client, admin_headers):
    def _create(title="Hello World", headers=None, **fields):
        payload = {"title": title, "content": "Body text", **fields}
        response = client.post("/api/posts", json=payload, headers=headers or admin_headers)
        assert response.status_code == 201, response.get_json()
        return response.get_json()["data"]["post"]
    return _create

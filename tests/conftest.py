"""
Pytest configuration and shared fixtures for all tests.

This module provides shared fixtures for the test suite, including:
- A tmp_path backed SQLite content store
- A token authorizer with an admin and a read-only token
- The Flask application and its test client
- A helper for creating font families through the API
"""
import json

import pytest

from auth import TokenAuthorizer
from config import get_default_config
from font_library.app import create_app
from storage import SQLiteContentStore

ADMIN_TOKEN = "admin-test-token"
VIEWER_TOKEN = "viewer-test-token"

COLLECTION_URL = "/wp/v2/font-families"


@pytest.fixture
def store(tmp_path):
    """Fresh SQLite content store for each test."""
    return SQLiteContentStore(str(tmp_path / "font_library"))


@pytest.fixture
def authorizer():
    """Authorizer with one full-access token and one without edit_theme_options."""
    return TokenAuthorizer([
        {"name": "admin", "token": ADMIN_TOKEN, "capabilities": ["edit_theme_options"]},
        {"name": "viewer", "token": VIEWER_TOKEN, "capabilities": ["read"]},
    ])


@pytest.fixture
def app(store, authorizer):
    """Flask app wired to the test store and authorizer."""
    app = create_app(get_default_config(), store=store, authorizer=authorizer)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin_headers():
    return {"Authorization": f"Bearer {ADMIN_TOKEN}"}


@pytest.fixture
def viewer_headers():
    return {"Authorization": f"Bearer {VIEWER_TOKEN}"}


@pytest.fixture
def create_family(client, admin_headers):
    """Create a font family through the API and return the response.

    Example:
        >>> response = create_family(name="Arial", slug="arial", fontFamily="Arial")
        >>> response.status_code
        201
    """
    def _create(**settings):
        return client.post(
            COLLECTION_URL,
            json={"font_family_settings": json.dumps(settings)},
            headers=admin_headers,
        )

    return _create

# tests/conftest.py
"""
Test configuration and shared fixtures.

Provides the Flask app, test client, CLI runner and the app's address store.
`flask_session` adapts the test client to the small part of requests.Session
that StoreClient uses, so client/picker/CLI tests hit the real API routes.
"""

import os
import sys
from urllib.parse import urlsplit

import pytest

# Add the project root to sys.path
PROJECT_ROOT = os.path.dirname(os.path.dirname(__file__))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)


@pytest.fixture
def app(monkeypatch):
    """Create and configure a Flask app instance for testing."""
    monkeypatch.setenv("APP_CONFIG", "address_picker.config.TestConfig")
    # Keep geocoding tests in control of the key
    monkeypatch.setenv("GOOGLE_MAPS_API_KEY", "")

    from address_picker import create_app

    app = create_app()
    app.config.update({
        "TESTING": True,
        "WTF_CSRF_ENABLED": False,
        "RATELIMIT_ENABLED": False,
    })

    yield app


@pytest.fixture
def client(app):
    """Create a test client for the Flask app."""
    return app.test_client()


@pytest.fixture
def runner(app):
    """Create a test CLI runner for the Flask app."""
    return app.test_cli_runner()


@pytest.fixture
def store(app):
    """The in-memory store attached to the test app."""
    from address_picker.services.address_store import get_store

    with app.app_context():
        yield get_store()


class _FlaskResponse:
    """The bits of requests.Response that StoreClient reads."""

    def __init__(self, resp):
        self._resp = resp
        self.status_code = resp.status_code
        self.ok = resp.status_code < 400

    def json(self):
        data = self._resp.get_json(silent=True)
        if data is None:
            raise ValueError("No JSON body")
        return data


class FlaskSession:
    """Route requests.Session.request() calls into a Flask test client."""

    def __init__(self, test_client):
        self.client = test_client
        self.calls = []

    def request(self, method, url, timeout=None, json=None, params=None, headers=None):
        path = urlsplit(url).path
        self.calls.append((method, path))
        resp = self.client.open(
            path, method=method, json=json, query_string=params, headers=headers or {}
        )
        return _FlaskResponse(resp)


@pytest.fixture
def flask_session(client):
    return FlaskSession(client)


@pytest.fixture
def store_client(flask_session):
    from address_picker.services.store_client import StoreClient

    return StoreClient("http://localhost/api", session=flask_session)


@pytest.fixture
def sample_addresses():
    """Sample (address, category) pairs."""
    return [
        ("221B Baker Street, London", "Home"),
        ("1600 Amphitheatre Pkwy, Mountain View, CA", "Office"),
        ("Gateway of India, Mumbai", "Friends & Family"),
    ]

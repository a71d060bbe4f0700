"""
Centralized configuration for all environments.

Select a config by setting:
  APP_CONFIG=address_picker.config.DevConfig      # local dev
  APP_CONFIG=address_picker.config.ProdConfig     # production (default if unset)
  APP_CONFIG=address_picker.config.TestConfig     # pytest

Notes:
- SECRET_KEY is read from FLASK_SECRET_KEY
- GOOGLE_MAPS_API_KEY is injected into the picker page and used for server-side
  geocoding; it is never hard-coded.
- Rate limiting uses Flask-Limiter v3 keys (RATELIMIT_*).
"""

from __future__ import annotations
import os


def _parse_categories(raw: str) -> list[str]:
    return [c.strip() for c in raw.split(",") if c.strip()]


def _parse_center(raw: str) -> tuple[float, float]:
    try:
        lat, lng = (float(p) for p in raw.split(","))
        return lat, lng
    except ValueError:
        return 20.5937, 78.9629


class BaseConfig:
    # Secrets & basics
    SECRET_KEY = os.getenv("FLASK_SECRET_KEY", "")
    DEBUG = False
    TESTING = False
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Session configuration
    SESSION_COOKIE_SECURE = True
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = "Lax"

    # Mapping provider (page widget + server-side geocoding)
    GOOGLE_MAPS_API_KEY = os.getenv("GOOGLE_MAPS_API_KEY", "")
    GEOCODE_TIMEOUT = float(os.getenv("GEOCODE_TIMEOUT", "6"))

    # Store API as seen by clients (page script, CLI)
    STORE_API_BASE_URL = os.getenv("STORE_API_BASE_URL", "http://localhost:5000/api")
    STORE_CLIENT_TIMEOUT = float(os.getenv("STORE_CLIENT_TIMEOUT", "10"))

    # Picker page
    ADDRESS_CATEGORIES = _parse_categories(os.getenv("ADDRESS_CATEGORIES", "Home,Office,Friends & Family"))
    DEFAULT_MAP_CENTER = _parse_center(os.getenv("DEFAULT_MAP_CENTER", "20.5937,78.9629"))
    DEFAULT_MAP_ZOOM = int(os.getenv("DEFAULT_MAP_ZOOM", "15"))

    # Flask-Limiter v3
    RATELIMIT_ENABLED = os.getenv("RATELIMIT_ENABLED", "true").lower() == "true"
    RATELIMIT_STORAGE_URI = os.getenv("RATELIMIT_STORAGE_URI", "memory://")
    RATELIMIT_DEFAULT = os.getenv("RATELIMIT_DEFAULT", "120 per minute; 5000 per day")
    RATELIMIT_SAVE = os.getenv("RATELIMIT_SAVE", "30 per minute")
    RATELIMIT_GEOCODE = os.getenv("RATELIMIT_GEOCODE", "60 per minute")

    # Request bodies are tiny JSON objects
    MAX_CONTENT_LENGTH = 64 * 1024

    # Misc
    PREFERRED_URL_SCHEME = os.getenv("PREFERRED_URL_SCHEME", "https")


class ProdConfig(BaseConfig):
    """Production settings (selected by default if APP_CONFIG is unset)."""
    pass


class DevConfig(BaseConfig):
    """Developer-friendly settings."""
    DEBUG = True
    LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
    TEMPLATES_AUTO_RELOAD = True
    SEND_FILE_MAX_AGE_DEFAULT = 0
    PREFERRED_URL_SCHEME = "http"
    # Allow cookies over HTTP in dev
    SESSION_COOKIE_SECURE = False


class TestConfig(BaseConfig):
    """CI/pytest settings."""
    TESTING = True
    DEBUG = True
    SECRET_KEY = "test-secret-key-for-testing-only"
    # Usually disable the limiter and CSRF in tests to avoid flakiness
    RATELIMIT_ENABLED = False
    WTF_CSRF_ENABLED = False
    SESSION_COOKIE_SECURE = False
    GOOGLE_MAPS_API_KEY = "test-maps-key"
    STORE_API_BASE_URL = "http://localhost/api"

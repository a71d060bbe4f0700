"""
Application factory and global configuration.

Creates the Flask app, applies security headers (CSP), configures rate limiting
and CSRF, creates the in-memory address store, registers blueprints and CLI
commands. This file keeps startup/config concerns together and avoids domain
logic here.
"""

from __future__ import annotations
import logging
import os
from flask import Flask, Response, jsonify, request
from dotenv import load_dotenv
from .extensions import limiter, csrf
from .routes.api import api_bp
from .routes.web import web_bp
from .services.address_store import init_store
from .cli import COMMANDS


def _validate_production_security(app: Flask, cfg_path: str) -> None:
    """
    Validate critical security settings in production environments.

    Raises RuntimeError if production security requirements are not met.

    Checks:
    - SECRET_KEY must be set and strong (>= 32 characters)
    - DEBUG must be False
    - GOOGLE_MAPS_API_KEY must be set (the picker is useless without it)
    """
    is_production = "ProdConfig" in cfg_path
    is_test = app.config.get("TESTING", False)
    if not is_production or is_test:
        return

    errors = []

    secret_key = app.config.get("SECRET_KEY", "")
    if not secret_key:
        errors.append(
            "SECRET_KEY is not set. Set FLASK_SECRET_KEY environment variable. "
            "Generate with: python -c 'import secrets; print(secrets.token_hex(32))'"
        )
    elif len(secret_key) < 32:
        errors.append(
            f"SECRET_KEY is too weak ({len(secret_key)} chars). "
            "Must be at least 32 characters for production security."
        )

    if app.config.get("DEBUG", False):
        errors.append("DEBUG must be False in production.")

    if not app.config.get("GOOGLE_MAPS_API_KEY"):
        errors.append("GOOGLE_MAPS_API_KEY is not set. The map and address lookups need it.")

    if errors:
        error_msg = "\n\n[ERROR] PRODUCTION SECURITY VALIDATION FAILED:\n\n" + "\n\n".join(f"  * {err}" for err in errors)
        error_msg += "\n\n[WARNING] The application will not start until these issues are resolved.\n"
        raise RuntimeError(error_msg)

    app.logger.info("[OK] Production security validation passed")


def _configure_logging(app: Flask) -> None:
    level = getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")).upper(), logging.INFO)
    app.logger.setLevel(level)
    logging.getLogger(__name__).setLevel(level)


def create_app() -> Flask:
    # Load .env early (for local dev)
    load_dotenv(override=True)

    app = Flask(
        __name__,
        static_folder="static",
        template_folder="templates",
    )

    # Allow APP_CONFIG to override (e.g., address_picker.config.DevConfig)
    cfg_path = os.getenv("APP_CONFIG", "address_picker.config.ProdConfig")
    try:
        app.config.from_object(cfg_path)
    except (ImportError, AttributeError) as e:
        app.logger.warning(f"Could not load config object {cfg_path}: {e}")

    _configure_logging(app)
    _validate_production_security(app, cfg_path)

    limiter.init_app(app)
    if not app.config.get("RATELIMIT_ENABLED", True):
        limiter.enabled = False

    if not app.secret_key:
        app.secret_key = app.config.get("SECRET_KEY", "")

    csrf.init_app(app)
    # The JSON API carries no session or user state; clients post plain JSON
    csrf.exempt(api_bp)

    # Process-wide in-memory store; lives as long as the app object
    init_store(app)

    # ---- Content Security Policy ----
    # Google Maps needs its script, tile and font origins.
    # The page config is a type="application/json" block (data, not executable).
    csp = (
        "default-src 'self'; "
        "script-src 'self' https://maps.googleapis.com https://maps.gstatic.com; "
        "style-src 'self' 'unsafe-inline' https://fonts.googleapis.com; "
        "img-src 'self' data: https://*.googleapis.com https://*.gstatic.com https://*.google.com; "
        "font-src 'self' https://fonts.gstatic.com; "
        "connect-src 'self' https://maps.googleapis.com https://*.googleapis.com; "
        "object-src 'none'; "
        "base-uri 'self'; "
        "frame-ancestors 'none'; "
        "form-action 'self'"
    )

    @app.after_request
    def apply_security_headers(resp: Response) -> Response:
        resp.headers["Content-Security-Policy"] = csp
        resp.headers["X-Content-Type-Options"] = "nosniff"
        resp.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        resp.headers["X-Frame-Options"] = "DENY"
        return resp

    # Unknown /api routes (and non-integer ids) answer JSON like the rest of the API
    @app.errorhandler(404)
    def not_found(err):
        if request.path.startswith("/api/"):
            return jsonify({"error": "Not found"}), 404
        return err

    # Blueprints
    app.register_blueprint(web_bp)
    app.register_blueprint(api_bp, url_prefix="/api")

    for command in COMMANDS:
        app.cli.add_command(command)

    return app

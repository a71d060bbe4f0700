"""
Error types shared by the store, the geocoder and the picker.

Each error carries a user-facing message and the HTTP status the API maps it
to. `sanitize_error()` is used for everything else: it logs the real exception
and hands back a generic message that is safe to show.
"""

from __future__ import annotations
import logging
from flask import current_app, has_app_context

logger = logging.getLogger(__name__)

GENERIC_MESSAGES = {
    "store": "Unable to process the address request. Please try again.",
    "geocode": "Address lookup is unavailable right now.",
    "default": "Something went wrong. Please try again.",
}


class AddressPickerError(Exception):
    """Base class for errors that map to a JSON `{error: message}` response."""

    status_code = 500

    def __init__(self, message: str | None = None):
        self.message = message or GENERIC_MESSAGES["default"]
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"error": self.message}


class ValidationError(AddressPickerError):
    """A required field is missing or empty, or a value is out of range."""

    status_code = 400


class NotFoundError(AddressPickerError):
    """No record with the requested id."""

    status_code = 404


class NetworkError(AddressPickerError):
    """An outbound HTTP call (store or geocoding) failed."""

    status_code = 502


class PermissionDenied(AddressPickerError):
    """The geolocation provider refused or could not supply a position."""

    status_code = 403


def sanitize_error(exc: Exception, kind: str = "default", context: str = "") -> str:
    """
    Log an unexpected exception and return a message safe for the client.

    Args:
        exc: The exception that was raised
        kind: Key into GENERIC_MESSAGES
        context: Short description of what was being attempted (logged only)
    """
    message = f"{context}: {exc}" if context else str(exc)
    if has_app_context():
        current_app.logger.error(message)
    else:
        logger.error(message)
    return GENERIC_MESSAGES.get(kind, GENERIC_MESSAGES["default"])

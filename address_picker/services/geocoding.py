"""
Geocoding helpers (Google Geocoding API).

Functions:
- reverse_geocode(lat, lng): formatted address for a coordinate pair, or None.
- geocode(query, limit): candidate places for a free-text query.

Notes:
- The API key is read from the environment first, then from app config, so the
  browser never needs the key for lookups done here.
- An empty result is not an error. Transport failures and non-OK statuses
  raise NetworkError so callers can tell "nothing here" from "lookup failed".
"""

from __future__ import annotations
import os
from typing import Dict, List, Optional
import requests
from flask import current_app, has_app_context

from ..utils.errors import NetworkError, ValidationError
from ..utils.validation import parse_coordinates

GEOCODE_URL = "https://maps.googleapis.com/maps/api/geocode/json"
DEFAULT_TIMEOUT = 6

# Statuses the API uses for "ran fine, found nothing"
_EMPTY_STATUSES = {"ZERO_RESULTS"}


def _get_api_key() -> str | None:
    key = os.getenv("GOOGLE_MAPS_API_KEY")
    if not key and has_app_context():
        key = current_app.config.get("GOOGLE_MAPS_API_KEY")
    return key or None


def _get_timeout() -> float:
    if has_app_context():
        return current_app.config.get("GEOCODE_TIMEOUT", DEFAULT_TIMEOUT)
    return DEFAULT_TIMEOUT


def _log_warning(message: str) -> None:
    if has_app_context():
        current_app.logger.warning(message)


def _call(params: Dict[str, str]) -> List[Dict]:
    """Run one Geocoding API request and return its `results` list."""
    try:
        r = requests.get(GEOCODE_URL, params=params, timeout=_get_timeout())
        r.raise_for_status()
        data = r.json()
    except (requests.RequestException, ValueError) as e:
        raise NetworkError(f"Geocoding request failed: {e}") from e

    if not isinstance(data, dict):
        raise NetworkError("Geocoding request failed: unexpected response body")

    status = data.get("status", "OK")
    if status in _EMPTY_STATUSES:
        return []
    if status != "OK":
        raise NetworkError(f"Geocoding request failed: {status}")
    return data.get("results") or []


def reverse_geocode(lat, lng) -> Optional[str]:
    """
    Resolve coordinates to a human-readable address.

    Returns the first result's formatted address, or None when there is no
    result or no API key is configured.

    Raises:
        ValidationError: coordinates are not numbers or out of range
        NetworkError: the lookup itself failed
    """
    coords = parse_coordinates(lat, lng)
    if coords is None:
        raise ValidationError("Valid latitude and longitude are required")

    key = _get_api_key()
    if not key:
        _log_warning("GOOGLE_MAPS_API_KEY not configured; reverse geocoding disabled")
        return None

    results = _call({"latlng": f"{coords[0]},{coords[1]}", "key": key})
    if not results:
        return None
    return results[0].get("formatted_address") or None


def geocode(query: str | None, limit: int = 5) -> List[Dict]:
    """
    Search places by free text.

    Returns up to `limit` dicts with `formatted_address`, `lat` and `lng`.
    Blank queries and missing keys give an empty list.
    """
    q = (query or "").strip()
    if not q:
        return []

    key = _get_api_key()
    if not key:
        _log_warning("GOOGLE_MAPS_API_KEY not configured; geocoding disabled")
        return []

    out: List[Dict] = []
    for item in _call({"address": q, "key": key}):
        location = (item.get("geometry") or {}).get("location") or {}
        if "lat" not in location or "lng" not in location:
            continue
        out.append({
            "formatted_address": item.get("formatted_address", ""),
            "lat": location["lat"],
            "lng": location["lng"],
        })
        if len(out) >= limit:
            break
    return out

"""
HTTP client for the address store API.

Used by the CLI (through LocationPicker) to talk to a running server. Error
responses are turned back into the same exceptions the server raised, so code
on either side handles ValidationError/NotFoundError the same way.
"""

from __future__ import annotations
from typing import Any, Dict, List, Optional
import requests

from ..utils.errors import NetworkError, NotFoundError, ValidationError

DEFAULT_TIMEOUT = 10


class StoreClient:
    def __init__(
        self,
        base_url: str,
        session: Optional[requests.Session] = None,
        timeout: float | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout or DEFAULT_TIMEOUT

    def _request(self, method: str, path: str, **kwargs) -> Any:
        url = f"{self.base_url}{path}"
        try:
            r = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise NetworkError(f"{method} {url} failed: {e}") from e

        try:
            data = r.json()
        except ValueError:
            data = None

        if r.ok:
            return data

        message = data.get("error") if isinstance(data, dict) else None
        if r.status_code == 400:
            raise ValidationError(message)
        if r.status_code == 404:
            raise NotFoundError(message)
        raise NetworkError(message or f"{method} {url} returned {r.status_code}")

    # -------- store operations --------

    def list_addresses(self) -> List[Dict[str, Any]]:
        data = self._request("GET", "/addresses")
        return data if isinstance(data, list) else []

    def save_address(self, address: str, category: str) -> Dict[str, Any]:
        """POST the record and return the server's `newAddress`."""
        data = self._request(
            "POST", "/save-address", json={"address": address, "category": category}
        )
        return (data or {}).get("newAddress") or {}

    def delete_address(self, address_id: int) -> Dict[str, Any]:
        return self._request("DELETE", f"/delete-address/{int(address_id)}") or {}

    # -------- geocoding (lets the client act as the picker's geocoder) --------

    def reverse_geocode(self, lat: float, lng: float) -> Optional[str]:
        data = self._request("GET", "/reverse-geocode", params={"lat": lat, "lng": lng})
        return (data or {}).get("address") or None

    def geocode(self, query: str) -> List[Dict[str, Any]]:
        data = self._request("GET", "/geocode", params={"q": query})
        return (data or {}).get("results") or []

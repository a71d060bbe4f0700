"""
Location picker controller.

Holds the state behind the picker page (map focal point, current address,
chosen category, saved list) and implements what each user action does:

- select_place / search: place search resolution
- locate_me: device geolocation + reverse geocoding
- drag_marker: marker drag + reverse geocoding
- save / delete / refresh: synchronization with the address store

The store is anything with list_addresses/save_address/delete_address (a
StoreClient in practice); the geocoder is anything with reverse_geocode and
geocode (StoreClient again, or the geocoding service module).

Every resolution takes a ticket when it starts. A resolved address is applied
only if its ticket is newer than the last one applied, so a slow lookup can't
overwrite the result of a later action.
"""

from __future__ import annotations
import itertools
import logging
from typing import Any, Callable, Dict, List, Optional, Tuple
from flask import current_app, has_app_context

from ..utils.errors import AddressPickerError, PermissionDenied
from ..utils.validation import MAX_CATEGORY_LEN, normalize_text, parse_coordinates

logger = logging.getLogger(__name__)

# India, as on the page
DEFAULT_POSITION: Tuple[float, float] = (20.5937, 78.9629)

NOTICE_GEOLOCATION_UNSUPPORTED = "Geolocation is not supported by your browser."
NOTICE_GEOLOCATION_DENIED = "Location permission denied or unavailable."
NOTICE_LOOKUP_FAILED = "Unable to look up the address for this location."
NOTICE_NO_PLACES = "No matching places found."
NOTICE_SEARCH_FAILED = "Place search failed."
NOTICE_SAVE_INVALID = "Please provide a valid address and select a category."
NOTICE_SAVE_OK = "Address saved successfully!"
NOTICE_SAVE_FAILED = "Failed to save address."


def _safe_log_error(message: str) -> None:
    if has_app_context():
        current_app.logger.error(message)
    else:
        logger.error(message)


def _place_coords(place: Dict[str, Any]) -> Optional[Tuple[float, float]]:
    """Accept either flat lat/lng or a Google-style geometry.location."""
    location = (place.get("geometry") or {}).get("location") or place
    return parse_coordinates(location.get("lat"), location.get("lng"))


class LocationPicker:
    def __init__(
        self,
        store,
        geocoder=None,
        notify: Optional[Callable[[str], None]] = None,
        default_position: Tuple[float, float] = DEFAULT_POSITION,
    ) -> None:
        self.store = store
        self.geocoder = geocoder if geocoder is not None else store
        self.notify = notify

        self.position: Tuple[float, float] = default_position
        self.address: str = ""
        self.category: str = ""
        self.saved_addresses: List[Dict[str, Any]] = []
        self.notices: List[str] = []

        self._tickets = itertools.count(1)
        self._applied_ticket = 0

    # -------- notices & resolution bookkeeping --------

    def _notice(self, message: str) -> None:
        self.notices.append(message)
        if self.notify:
            self.notify(message)

    def _next_ticket(self) -> int:
        return next(self._tickets)

    def _complete(self, ticket: int) -> bool:
        """Record a finished resolution; False if a newer one already finished."""
        if ticket <= self._applied_ticket:
            logger.debug(f"Discarding stale address resolution #{ticket}")
            return False
        self._applied_ticket = ticket
        return True

    def _apply_address(self, ticket: int, address: Optional[str]) -> bool:
        """Set the current address unless a newer resolution already finished.

        Empty results still count as finished, so an older lookup landing late
        cannot overwrite the address of newer coordinates.
        """
        if not self._complete(ticket) or not address:
            return False
        self.address = address
        return True

    def _resolve_coords(self, ticket: int, lat: float, lng: float) -> bool:
        self.position = (lat, lng)
        try:
            address = self.geocoder.reverse_geocode(lat, lng)
        except AddressPickerError as e:
            _safe_log_error(f"Error fetching address: {e.message}")
            if self._complete(ticket):
                self._notice(NOTICE_LOOKUP_FAILED)
            return False
        return self._apply_address(ticket, address)

    # -------- resolution paths --------

    def select_place(self, place: Dict[str, Any]) -> bool:
        """Apply an autocomplete selection (formatted address + coordinates)."""
        ticket = self._next_ticket()
        coords = _place_coords(place or {})
        address = (place or {}).get("formatted_address")
        if coords is None or not address:
            logger.warning("Ignoring place without coordinates or formatted address")
            return False
        self.position = coords
        return self._apply_address(ticket, address)

    def search(self, query: str) -> bool:
        """Look the query up and select the best match."""
        try:
            places = self.geocoder.geocode(query)
        except AddressPickerError as e:
            _safe_log_error(f"Error searching places: {e.message}")
            self._notice(NOTICE_SEARCH_FAILED)
            return False
        if not places:
            self._notice(NOTICE_NO_PLACES)
            return False
        return self.select_place(places[0])

    def locate_me(self, locate: Optional[Callable[[], Tuple[float, float]]]) -> bool:
        """
        Use the device position. `locate` returns (lat, lng) or raises
        PermissionDenied; None means the platform has no geolocation.
        """
        if locate is None:
            self._notice(NOTICE_GEOLOCATION_UNSUPPORTED)
            return False
        ticket = self._next_ticket()
        try:
            lat, lng = locate()
        except PermissionDenied as e:
            logger.info(f"Geolocation refused: {e.message}")
            self._notice(NOTICE_GEOLOCATION_DENIED)
            return False
        return self._resolve_coords(ticket, lat, lng)

    def drag_marker(self, lat: float, lng: float) -> bool:
        """Marker dropped at new coordinates."""
        ticket = self._next_ticket()
        return self._resolve_coords(ticket, lat, lng)

    # -------- store synchronization --------

    def set_category(self, category: str | None) -> None:
        self.category = normalize_text(category, MAX_CATEGORY_LEN)

    def refresh(self) -> List[Dict[str, Any]]:
        """Replace the local list with the store's. Failures keep the old list."""
        try:
            self.saved_addresses = list(self.store.list_addresses())
        except AddressPickerError as e:
            _safe_log_error(f"Error fetching addresses: {e.message}")
        return self.saved_addresses

    def mount(self) -> List[Dict[str, Any]]:
        return self.refresh()

    def save(self) -> Optional[Dict[str, Any]]:
        if not self.address or not self.category:
            self._notice(NOTICE_SAVE_INVALID)
            return None
        try:
            record = self.store.save_address(self.address, self.category)
        except AddressPickerError as e:
            _safe_log_error(f"Error saving address: {e.message}")
            self._notice(NOTICE_SAVE_FAILED)
            return None
        self._notice(NOTICE_SAVE_OK)
        self.refresh()
        return record

    def delete(self, address_id: int) -> bool:
        try:
            self.store.delete_address(address_id)
        except AddressPickerError as e:
            _safe_log_error(f"Error deleting address: {e.message}")
            return False
        self.refresh()
        return True

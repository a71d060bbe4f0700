"""
In-memory address store.

Holds saved addresses for the lifetime of the process. One store is created per
Flask app in the factory (see init_store) and fetched by the routes with
get_store(). Nothing is written to disk: a restart starts from an empty list.

Ids come from a counter owned by the store, so they are unique for the whole
run even when records are deleted.
"""

from __future__ import annotations
import itertools
import logging
import threading
from dataclasses import dataclass, asdict
from typing import Dict, List, Optional
from flask import current_app, has_app_context

from ..utils.errors import NotFoundError, ValidationError
from ..utils.validation import validate_address_payload

logger = logging.getLogger(__name__)

STORE_EXTENSION_KEY = "address_store"


def _safe_log_info(message: str) -> None:
    if has_app_context():
        current_app.logger.info(message)
    else:
        logger.info(message)


@dataclass(frozen=True)
class AddressRecord:
    id: int
    address: str
    category: str

    def to_dict(self) -> dict:
        return asdict(self)


class AddressStore:
    """
    State:
        _records: {id -> AddressRecord}, insertion ordered
        _ids: counter handing out ids starting at 1
        _lock: guards the mapping when the WSGI server runs threads
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._records: Dict[int, AddressRecord] = {}
        self._ids = itertools.count(1)

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def list_addresses(self) -> List[AddressRecord]:
        """Return all records in the order they were created."""
        with self._lock:
            return list(self._records.values())

    def get_address(self, address_id: int) -> Optional[AddressRecord]:
        with self._lock:
            return self._records.get(address_id)

    def create_address(self, address: str, category: str) -> AddressRecord:
        """
        Validate and append a new record.

        Raises:
            ValidationError: address or category missing/empty (nothing stored)
        """
        payload, err = validate_address_payload({"address": address, "category": category})
        if err:
            raise ValidationError(err)

        with self._lock:
            record = AddressRecord(
                id=next(self._ids),
                address=payload["address"],
                category=payload["category"],
            )
            self._records[record.id] = record

        _safe_log_info(f"Saved address {record.id} ({record.category})")
        return record

    def delete_address(self, address_id: int) -> AddressRecord:
        """
        Remove the record with this id and return it.

        Raises:
            NotFoundError: no record has this id
        """
        with self._lock:
            record = self._records.pop(address_id, None)
        if record is None:
            raise NotFoundError("Address not found")

        _safe_log_info(f"Deleted address {address_id}")
        return record

    def clear(self) -> None:
        """Drop every record. The id counter keeps going."""
        with self._lock:
            self._records.clear()


def init_store(app) -> AddressStore:
    """Create the app's store. Call this from the Flask app factory."""
    store = AddressStore()
    app.extensions[STORE_EXTENSION_KEY] = store
    app.logger.info("Address store initialized (in-memory)")
    return store


def get_store() -> AddressStore:
    """Return the store attached to the current app."""
    return current_app.extensions[STORE_EXTENSION_KEY]

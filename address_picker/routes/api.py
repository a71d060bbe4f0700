"""
Defines the JSON endpoints used by the picker page and the CLI client.

Endpoints (mounted under /api):
- GET    /addresses              all saved addresses, in creation order
- POST   /save-address           {address, category} -> {success, message, newAddress}
- DELETE /delete-address/<id>    {success, message}
- GET    /reverse-geocode        ?lat=..&lng=.. -> {address}
- GET    /geocode                ?q=.. -> {results}

Domain errors become `{error: message}` with their status code; unexpected
failures in the geocoding endpoints are logged and answered with a generic 500.
"""

from flask import Blueprint, current_app, request, jsonify

from ..extensions import limiter
from ..services import geocoding
from ..services.address_store import get_store
from ..utils.errors import AddressPickerError, ValidationError, sanitize_error
from ..utils.validation import validate_address_payload


api_bp = Blueprint("api", __name__)


def _save_limit() -> str:
    return current_app.config.get("RATELIMIT_SAVE", "30 per minute")


def _geocode_limit() -> str:
    return current_app.config.get("RATELIMIT_GEOCODE", "60 per minute")


@api_bp.errorhandler(AddressPickerError)
def handle_domain_error(err: AddressPickerError):
    return jsonify(err.to_dict()), err.status_code


@api_bp.route("/addresses", methods=["GET"])
def list_addresses():
    """Return every saved address. Always 200, possibly an empty list."""
    return jsonify([r.to_dict() for r in get_store().list_addresses()])


@api_bp.route("/save-address", methods=["POST"])
@limiter.limit(_save_limit)
def save_address():
    """
    Create an address record.

    Request body (JSON):
        {
            "address": "221B Baker Street",
            "category": "Home"
        }

    Returns:
        200: {"success": true, "message": ..., "newAddress": {id, address, category}}
        400: {"error": "Address and category are required"}
    """
    payload, err_msg = validate_address_payload(request.get_json(silent=True))
    if err_msg:
        raise ValidationError(err_msg)

    record = get_store().create_address(payload["address"], payload["category"])
    return jsonify({
        "success": True,
        "message": "Address saved successfully",
        "newAddress": record.to_dict(),
    })


@api_bp.route("/delete-address/<int:address_id>", methods=["DELETE"])
def delete_address(address_id: int):
    """
    Delete an address by id.

    Returns:
        200: {"success": true, "message": "Address deleted successfully"}
        404: {"error": "Address not found"}
    """
    get_store().delete_address(address_id)
    return jsonify({"success": True, "message": "Address deleted successfully"})


@api_bp.route("/reverse-geocode", methods=["GET"])
@limiter.limit(_geocode_limit)
def reverse_geocode():
    """Formatted address for ?lat=..&lng=..; `address` is null when nothing matches."""
    try:
        address = geocoding.reverse_geocode(request.args.get("lat"), request.args.get("lng"))
    except AddressPickerError:
        raise
    except Exception as e:
        return jsonify({"error": sanitize_error(e, "geocode", "Reverse geocoding failed")}), 500
    return jsonify({"address": address})


@api_bp.route("/geocode", methods=["GET"])
@limiter.limit(_geocode_limit)
def geocode():
    """Candidate places for ?q=.. (used by the CLI search path)."""
    try:
        results = geocoding.geocode(request.args.get("q", type=str))
    except AddressPickerError:
        raise
    except Exception as e:
        return jsonify({"error": sanitize_error(e, "geocode", "Place search failed")}), 500
    return jsonify({"results": results})

"""
UI routes.

Serves the location picker page. The page itself is a thin shell: the map,
autocomplete and marker come from the Google Maps script, and everything that
touches saved addresses goes through the JSON API in routes/api.py.
"""

from flask import Blueprint, render_template, current_app

from ..extensions import limiter

web_bp = Blueprint("web", __name__)


@web_bp.route("/healthz")
@limiter.exempt
def healthz():
    """Simple health endpoint to verify the server responds."""
    return "OK", 200


@web_bp.route("/", methods=["GET"])
@limiter.limit("120 per minute")  # modest protection for the index page
def index():
    """
    Render the picker. The maps key, category choices and map defaults come
    from config so nothing provider-specific is baked into the template.
    """
    lat, lng = current_app.config.get("DEFAULT_MAP_CENTER", (20.5937, 78.9629))
    return render_template(
        "index.html",
        maps_api_key=current_app.config.get("GOOGLE_MAPS_API_KEY", ""),
        categories=current_app.config.get("ADDRESS_CATEGORIES", []),
        map_center={"lat": lat, "lng": lng},
        map_zoom=current_app.config.get("DEFAULT_MAP_ZOOM", 15),
        api_base="/api",
    )

"""
Unit tests for the geocoding helpers (address_picker/services/geocoding.py).

requests.get is mocked; no test talks to the real Google API.
"""

import pytest
import requests
from unittest.mock import patch, MagicMock

from address_picker.services import geocoding
from address_picker.utils.errors import NetworkError, ValidationError


def _response(payload, status_ok=True):
    resp = MagicMock()
    resp.json.return_value = payload
    if not status_ok:
        resp.raise_for_status.side_effect = requests.HTTPError("500 Server Error")
    return resp


class TestReverseGeocode:

    @patch("address_picker.services.geocoding.requests.get")
    @patch("address_picker.services.geocoding._get_api_key")
    def test_returns_first_formatted_address(self, mock_key, mock_get):
        mock_key.return_value = "test-key"
        mock_get.return_value = _response({
            "status": "OK",
            "results": [
                {"formatted_address": "221B Baker St, London NW1 6XE, UK"},
                {"formatted_address": "Marylebone, London, UK"},
            ],
        })

        result = geocoding.reverse_geocode(51.5237, -0.1585)

        assert result == "221B Baker St, London NW1 6XE, UK"
        args, kwargs = mock_get.call_args
        assert args[0] == geocoding.GEOCODE_URL
        assert kwargs["params"] == {"latlng": "51.5237,-0.1585", "key": "test-key"}
        assert kwargs["timeout"] == geocoding.DEFAULT_TIMEOUT

    @patch("address_picker.services.geocoding.requests.get")
    @patch("address_picker.services.geocoding._get_api_key")
    def test_zero_results_is_none(self, mock_key, mock_get):
        mock_key.return_value = "test-key"
        mock_get.return_value = _response({"status": "ZERO_RESULTS", "results": []})

        assert geocoding.reverse_geocode(0.0, 0.0) is None

    @patch("address_picker.services.geocoding.requests.get")
    @patch("address_picker.services.geocoding._get_api_key")
    def test_accepts_string_coordinates(self, mock_key, mock_get):
        mock_key.return_value = "test-key"
        mock_get.return_value = _response({"status": "OK", "results": [{"formatted_address": "Somewhere"}]})

        assert geocoding.reverse_geocode("10.5", "20.25") == "Somewhere"
        assert mock_get.call_args.kwargs["params"]["latlng"] == "10.5,20.25"

    @patch("address_picker.services.geocoding.requests.get")
    @patch("address_picker.services.geocoding._get_api_key")
    def test_missing_key_skips_request(self, mock_key, mock_get):
        mock_key.return_value = None

        assert geocoding.reverse_geocode(1.0, 2.0) is None
        mock_get.assert_not_called()

    @pytest.mark.parametrize("lat,lng", [
        (None, 1.0),
        ("abc", 1.0),
        (91.0, 0.0),
        (0.0, -181.0),
        (float("nan"), 0.0),
    ])
    def test_invalid_coordinates(self, lat, lng):
        with pytest.raises(ValidationError):
            geocoding.reverse_geocode(lat, lng)

    @patch("address_picker.services.geocoding.requests.get")
    @patch("address_picker.services.geocoding._get_api_key")
    def test_transport_error_raises_network_error(self, mock_key, mock_get):
        mock_key.return_value = "test-key"
        mock_get.side_effect = requests.ConnectionError("connection refused")

        with pytest.raises(NetworkError):
            geocoding.reverse_geocode(1.0, 2.0)

    @patch("address_picker.services.geocoding.requests.get")
    @patch("address_picker.services.geocoding._get_api_key")
    def test_http_error_raises_network_error(self, mock_key, mock_get):
        mock_key.return_value = "test-key"
        mock_get.return_value = _response({}, status_ok=False)

        with pytest.raises(NetworkError):
            geocoding.reverse_geocode(1.0, 2.0)

    @patch("address_picker.services.geocoding.requests.get")
    @patch("address_picker.services.geocoding._get_api_key")
    def test_denied_status_raises_network_error(self, mock_key, mock_get):
        mock_key.return_value = "bad-key"
        mock_get.return_value = _response({"status": "REQUEST_DENIED", "results": []})

        with pytest.raises(NetworkError) as exc:
            geocoding.reverse_geocode(1.0, 2.0)
        assert "REQUEST_DENIED" in exc.value.message

    @patch("address_picker.services.geocoding.requests.get")
    @patch("address_picker.services.geocoding._get_api_key")
    def test_non_object_body_raises_network_error(self, mock_key, mock_get):
        mock_key.return_value = "test-key"
        mock_get.return_value = _response(["not", "an", "object"])

        with pytest.raises(NetworkError):
            geocoding.reverse_geocode(1.0, 2.0)


class TestGeocode:

    @patch("address_picker.services.geocoding.requests.get")
    @patch("address_picker.services.geocoding._get_api_key")
    def test_returns_places(self, mock_key, mock_get):
        mock_key.return_value = "test-key"
        mock_get.return_value = _response({
            "status": "OK",
            "results": [
                {"formatted_address": "Gateway of India, Mumbai",
                 "geometry": {"location": {"lat": 18.922, "lng": 72.8347}}},
                {"formatted_address": "No geometry here"},
            ],
        })

        places = geocoding.geocode("gateway of india")

        assert places == [{"formatted_address": "Gateway of India, Mumbai", "lat": 18.922, "lng": 72.8347}]
        assert mock_get.call_args.kwargs["params"]["address"] == "gateway of india"

    @patch("address_picker.services.geocoding.requests.get")
    @patch("address_picker.services.geocoding._get_api_key")
    def test_respects_limit(self, mock_key, mock_get):
        mock_key.return_value = "test-key"
        mock_get.return_value = _response({
            "status": "OK",
            "results": [
                {"formatted_address": f"Place {i}", "geometry": {"location": {"lat": i, "lng": i}}}
                for i in range(10)
            ],
        })

        assert len(geocoding.geocode("place", limit=3)) == 3

    @patch("address_picker.services.geocoding.requests.get")
    def test_blank_query(self, mock_get):
        assert geocoding.geocode("   ") == []
        assert geocoding.geocode(None) == []
        mock_get.assert_not_called()


class TestApiKeyLookup:

    def test_env_wins(self, monkeypatch, app):
        monkeypatch.setenv("GOOGLE_MAPS_API_KEY", "from-env")
        with app.app_context():
            assert geocoding._get_api_key() == "from-env"

    def test_falls_back_to_config(self, monkeypatch, app):
        monkeypatch.setenv("GOOGLE_MAPS_API_KEY", "")
        with app.app_context():
            assert geocoding._get_api_key() == "test-maps-key"

    def test_no_context_no_env(self, monkeypatch):
        monkeypatch.delenv("GOOGLE_MAPS_API_KEY", raising=False)
        assert geocoding._get_api_key() is None

"""Unit tests for the route ETA estimate and its fallback."""

from unittest import mock

import pytest
import requests

from modules.delivery.directions import DirectionsClient, fallback_minutes
from modules.delivery.geo import Coordinates

pytestmark = pytest.mark.unit

ORIGIN = Coordinates(40.4168, -3.7038)
DESTINATION = Coordinates(40.4268, -3.7038)  # 1.1 km


def _ors_response(duration_s, distance_m):
    response = mock.Mock()
    response.raise_for_status.return_value = None
    response.json.return_value = {
        "routes": [{"summary": {"duration": duration_s, "distance": distance_m}}]
    }
    return response


class TestFallback:
    def test_fallback_is_three_minutes_per_km_rounded_up(self):
        assert fallback_minutes(1.1) == 4
        assert fallback_minutes(0.0) == 0
        assert fallback_minutes(2.0) == 6

    def test_without_api_key_no_http_call(self):
        client = DirectionsClient(api_key="")
        with mock.patch("modules.delivery.directions.requests.post") as post:
            estimate = client.route_estimate(ORIGIN, DESTINATION)
        post.assert_not_called()
        assert estimate.duration_minutes == 4
        assert estimate.distance_km == 1.1

    def test_timeout_falls_back(self):
        client = DirectionsClient(api_key="key")
        with mock.patch(
            "modules.delivery.directions.requests.post",
            side_effect=requests.Timeout("slow"),
        ):
            estimate = client.route_estimate(ORIGIN, DESTINATION)
        assert estimate.duration_minutes == 4

    def test_http_error_falls_back(self):
        response = mock.Mock()
        response.raise_for_status.side_effect = requests.HTTPError("403")
        client = DirectionsClient(api_key="key")
        with mock.patch("modules.delivery.directions.requests.post", return_value=response):
            estimate = client.route_estimate(ORIGIN, DESTINATION)
        assert estimate.duration_minutes == 4

    def test_malformed_payload_falls_back(self):
        response = mock.Mock()
        response.raise_for_status.return_value = None
        response.json.return_value = {"routes": []}
        client = DirectionsClient(api_key="key")
        with mock.patch("modules.delivery.directions.requests.post", return_value=response):
            estimate = client.route_estimate(ORIGIN, DESTINATION)
        assert estimate.duration_minutes == 4


class TestProviderEstimate:
    def test_uses_provider_duration_and_distance(self):
        client = DirectionsClient(api_key="key", timeout=2)
        with mock.patch(
            "modules.delivery.directions.requests.post",
            return_value=_ors_response(421, 1834),
        ) as post:
            estimate = client.route_estimate(ORIGIN, DESTINATION)

        assert estimate.duration_minutes == 8
        assert estimate.distance_km == 1.8
        _, kwargs = post.call_args
        assert kwargs["timeout"] == 2
        assert kwargs["headers"]["Authorization"] == "key"
        assert kwargs["json"]["coordinates"] == [[-3.7038, 40.4168], [-3.7038, 40.4268]]

"""Tests for the OSRM and Nominatim adapters with HTTP mocked out."""

from unittest.mock import MagicMock

import pytest
import requests

from wayfinder.errors import NotFound, ProviderUnavailable, RouteUnavailable
from wayfinder.models import Coord, Suggestion
from wayfinder.nav_config import NavConfig
from wayfinder.providers.nominatim import NominatimProvider
from wayfinder.providers.osrm import OSRMRoutingProvider, maneuver_instruction, parse_route
from wayfinder.step_tracker import locate_step

OSRM_OK = {
    "code": "Ok",
    "routes": [
        {
            "distance": 420.5,
            "duration": 61.0,
            "geometry": {"type": "LineString",
                         "coordinates": [[-74.0, 40.0], [-74.0, 40.002], [-73.998, 40.002]]},
            "legs": [
                {
                    "summary": "Main St, Oak Ave",
                    "steps": [
                        {
                            "distance": 222.0,
                            "name": "Main St",
                            "geometry": {"coordinates": [[-74.0, 40.0], [-74.0, 40.002]]},
                            "maneuver": {"type": "depart", "location": [-74.0, 40.0]},
                        },
                        {
                            "distance": 198.5,
                            "name": "Oak Ave",
                            "geometry": {"coordinates": [[-74.0, 40.002], [-73.998, 40.002]]},
                            "maneuver": {"type": "turn", "modifier": "right",
                                         "location": [-74.0, 40.002]},
                        },
                        {
                            "distance": 0.0,
                            "name": "Oak Ave",
                            "geometry": {"coordinates": [[-73.998, 40.002], [-73.998, 40.002]]},
                            "maneuver": {"type": "arrive", "location": [-73.998, 40.002]},
                        },
                    ],
                }
            ],
        },
        {"distance": 999.0, "legs": [], "geometry": {"coordinates": []}},
    ],
}


def mock_http(payload=None, error=None, status=200):
    http = MagicMock()
    http.headers = {}
    if error is not None:
        http.get.side_effect = error
    else:
        response = MagicMock()
        response.status_code = status
        response.reason = "OK" if status < 400 else "Error"
        response.json.return_value = payload
        http.get.return_value = response
    return http


class TestManeuverInstruction:
    def test_depart_is_empty(self):
        assert maneuver_instruction({"type": "depart"}, "Main St") == ""

    def test_turn(self):
        assert maneuver_instruction({"type": "turn", "modifier": "left"}, "Oak Ave") == "Turn left onto Oak Ave"

    def test_arrive(self):
        assert maneuver_instruction({"type": "arrive"}) == "Arrive at destination"

    def test_roundabout_exit(self):
        text = maneuver_instruction({"type": "roundabout", "exit": 2}, "Elm St")
        assert text == "Enter the roundabout and take exit 2 onto Elm St"

    def test_continue_without_name(self):
        assert maneuver_instruction({"type": "new name", "modifier": "straight"}) == "Continue straight"

    def test_merge_without_modifier(self):
        assert maneuver_instruction({"type": "merge"}, "I-95") == "Merge onto I-95"


class TestParseRoute:
    def test_first_route_only(self):
        route = parse_route(OSRM_OK)
        assert route.distance_m == 420.5
        assert route.expected_travel_time_s == 61.0
        assert [s.instruction for s in route.steps] == ["", "Turn right onto Oak Ave", "Arrive at destination"]
        assert [s.step_id for s in route.steps] == [0, 1, 2]
        assert route.geometry[0] == Coord(40.0, -74.0)

    def test_step_extents_are_trackable(self):
        route = parse_route(OSRM_OK)
        assert locate_step(route.steps, Coord(40.001, -74.0)) == 0
        assert locate_step(route.steps, Coord(40.002, -73.999)) == 1

    def test_error_code(self):
        with pytest.raises(RouteUnavailable):
            parse_route({"code": "NoRoute", "message": "Impossible route"})

    def test_no_routes(self):
        with pytest.raises(RouteUnavailable):
            parse_route({"code": "Ok", "routes": []})


class TestOSRMRoutingProvider:
    def test_request_shape(self):
        http = mock_http(OSRM_OK)
        provider = OSRMRoutingProvider(NavConfig(osrm_base_url="http://osrm.local/"), session=http)
        route = provider.route(Coord(40.0, -74.0), Coord(40.002, -73.998))

        url = http.get.call_args[0][0]
        assert url == "http://osrm.local/route/v1/driving/-74.0,40.0;-73.998,40.002"
        assert http.get.call_args[1]["params"]["steps"] == "true"
        assert len(route.steps) == 3

    def test_transport_error(self):
        http = mock_http(error=requests.ConnectionError("refused"))
        provider = OSRMRoutingProvider(session=http)
        with pytest.raises(ProviderUnavailable):
            provider.route(Coord(0.0, 0.0), Coord(1.0, 1.0))

    def test_http_error(self):
        http = mock_http({"message": "Too Many Requests"}, status=429)
        with pytest.raises(ProviderUnavailable, match="429"):
            OSRMRoutingProvider(session=http).route(Coord(0.0, 0.0), Coord(1.0, 1.0))

    def test_no_route_body_on_error_status(self):
        http = mock_http({"code": "NoRoute", "message": "Impossible route"}, status=400)
        with pytest.raises(RouteUnavailable):
            OSRMRoutingProvider(session=http).route(Coord(0.0, 0.0), Coord(1.0, 1.0))

    def test_bad_json(self):
        http = mock_http()
        http.get.return_value.json.side_effect = ValueError("not json")
        with pytest.raises(ProviderUnavailable):
            OSRMRoutingProvider(session=http).route(Coord(0.0, 0.0), Coord(1.0, 1.0))


class TestNominatimProvider:
    PLACES = [
        {"display_name": "Blue Cafe, 12 Oak Ave, Springfield", "lat": "40.1", "lon": "-74.2"},
        {"display_name": "Blue Lake", "lat": "41.0", "lon": "-75.0"},
    ]

    def test_complete_splits_display_name(self):
        provider = NominatimProvider(session=mock_http(self.PLACES))
        assert provider.complete("Blue") == [
            Suggestion("Blue Cafe", "12 Oak Ave, Springfield"),
            Suggestion("Blue Lake", ""),
        ]

    def test_lookup(self):
        http = mock_http(self.PLACES[:1])
        provider = NominatimProvider(session=http)
        coords = provider.lookup(Suggestion("Blue Cafe", "12 Oak Ave, Springfield"))
        assert coords == [Coord(40.1, -74.2)]
        assert http.get.call_args[1]["params"]["q"] == "Blue Cafe, 12 Oak Ave, Springfield"

    def test_geocode_not_found(self):
        with pytest.raises(NotFound):
            NominatimProvider(session=mock_http([])).geocode("Atlantis")

    def test_geocode(self):
        provider = NominatimProvider(session=mock_http(self.PLACES))
        assert provider.geocode("Blue") == Coord(40.1, -74.2)

    def test_http_error(self):
        http = mock_http(self.PLACES)
        http.get.return_value.raise_for_status.side_effect = requests.HTTPError("503")
        with pytest.raises(ProviderUnavailable):
            NominatimProvider(session=http).complete("Blue")

    def test_user_agent_header(self):
        http = mock_http([])
        NominatimProvider(NavConfig(user_agent="tests/1.0"), session=http)
        assert http.headers["User-Agent"] == "tests/1.0"

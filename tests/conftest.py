import json
from unittest.mock import MagicMock

import pytest

from tag_nominatim.geocoding.identification import IdentificationMethod
from tag_nominatim.geocoding.nominatim import Client

_MISSING = object()

DOWNING_STREET = {
    "place_id": 258449580,
    "licence": "Data © OpenStreetMap contributors, ODbL 1.0. http://osm.org/copyright",
    "osm_type": "way",
    "osm_id": 3057356,
    "lat": "51.5033635",
    "lon": "-0.1276248",
    "class": "building",
    "type": "house",
    "display_name": "10 Downing Street, London",
    "address": {
        "house_number": "10",
        "road": "Downing Street",
        "city": "London",
        "ISO3166-2-lvl4": "GB-ENG",
        "postcode": "SW1A 2AA",
        "country": "United Kingdom",
        "country_code": "gb",
    },
    "extratags": {"wikidata": "Q169101", "heritage": "2"},
    "boundingbox": ["51.5032", "51.5035", "-0.1278", "-0.1274"],
}


def make_response(status_code=200, json_data=_MISSING, text=None, reason="OK"):
    """Build a stand-in for requests.Response."""
    resp = MagicMock()
    resp.status_code = status_code
    resp.reason = reason
    if json_data is _MISSING:
        resp.json.side_effect = ValueError("Expecting value: line 1 column 1 (char 0)")
        resp.text = text if text is not None else ""
    else:
        resp.json.return_value = json_data
        resp.text = text if text is not None else json.dumps(json_data)
    return resp


@pytest.fixture
def client():
    return Client(
        base_url="https://nominatim.example.org/",
        identification=IdentificationMethod.from_user_agent("tag-nominatim-tests"),
        timeout=5,
    )

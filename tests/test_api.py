import pytest
from fastapi.testclient import TestClient

from tag_nominatim.api.app import app, get_client
from tag_nominatim.errors import ApiError, ParseError, RequestTimeoutError, TransportError
from tag_nominatim.models.place import Place, Status

from conftest import DOWNING_STREET


class FakeAsyncClient:
    """Records calls and answers with a canned result or error."""

    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error
        self.calls = []

    async def _answer(self, name, *args):
        self.calls.append((name, args))
        if self.error is not None:
            raise self.error
        return self.result

    async def reverse(self, coordinates, params=None):
        return await self._answer("reverse", coordinates, params)

    async def search(self, query, params=None):
        return await self._answer("search", query, params)

    async def lookup(self, osm_ids, params=None):
        return await self._answer("lookup", list(osm_ids), params)

    async def status(self):
        return await self._answer("status")


@pytest.fixture
def api():
    def install(fake):
        app.dependency_overrides[get_client] = lambda: fake
        return TestClient(app)

    yield install
    app.dependency_overrides.clear()


def test_root(api):
    response = api(FakeAsyncClient()).get("/")
    assert response.status_code == 200


def test_reverse(api):
    fake = FakeAsyncClient(result=Place.model_validate(DOWNING_STREET))

    response = api(fake).get("/reverse", params={"lat": 51.5033635, "lon": -0.1276248, "zoom": 18})

    assert response.status_code == 200
    body = response.json()
    assert body["display_name"] == "10 Downing Street, London"
    assert body["address"]["city"] == "London"
    assert body["class"] == "building"
    name, (coordinates, params) = fake.calls[0]
    assert coordinates.latitude == 51.5033635
    assert params.zoom == 18


def test_reverse_invalid_coordinates(api):
    fake = FakeAsyncClient()

    response = api(fake).get("/reverse", params={"lat": 200, "lon": 0})

    assert response.status_code == 422
    assert fake.calls == []


def test_reverse_zoom_out_of_range(api):
    response = api(FakeAsyncClient()).get("/reverse", params={"lat": 1, "lon": 1, "zoom": 30})
    assert response.status_code == 422


@pytest.mark.parametrize(
    "error, status_code",
    [
        (ApiError(200, "Unable to geocode"), 404),
        (ApiError(503, "Service Unavailable"), 502),
        (RequestTimeoutError("timed out"), 504),
        (TransportError("connection refused"), 502),
        (ParseError("body is not valid JSON", body="not json"), 502),
    ],
)
def test_reverse_upstream_errors(api, error, status_code):
    response = api(FakeAsyncClient(error=error)).get("/reverse", params={"lat": 1, "lon": 1})
    assert response.status_code == status_code


def test_reverse_api_error_detail(api):
    fake = FakeAsyncClient(error=ApiError(429, "Too many requests"))

    response = api(fake).get("/reverse", params={"lat": 1, "lon": 1})

    assert response.json()["detail"] == {"message": "Too many requests", "upstream_status": 429}


def test_search(api):
    fake = FakeAsyncClient(result=[Place.model_validate(DOWNING_STREET)])

    response = api(fake).get("/search", params={"q": "downing street", "limit": 1})

    assert response.status_code == 200
    assert [p["display_name"] for p in response.json()] == ["10 Downing Street, London"]
    assert fake.calls[0][1][0] == "downing street"
    assert fake.calls[0][1][1].limit == 1


def test_search_requires_query(api):
    response = api(FakeAsyncClient()).get("/search")
    assert response.status_code == 422


def test_lookup_splits_ids(api):
    fake = FakeAsyncClient(result=[])

    response = api(fake).get("/lookup", params={"osm_ids": "R146656,W50637691"})

    assert response.status_code == 200
    assert response.json() == []
    assert fake.calls[0][1][0] == ["R146656", "W50637691"]


def test_lookup_bad_ids(api):
    response = api(FakeAsyncClient(error=ValueError("At least one OSM id is required"))).get(
        "/lookup", params={"osm_ids": ","}
    )
    assert response.status_code == 422


def test_status(api):
    fake = FakeAsyncClient(result=Status(status=0, message="OK"))

    response = api(fake).get("/status")

    assert response.status_code == 200
    assert response.json()["message"] == "OK"

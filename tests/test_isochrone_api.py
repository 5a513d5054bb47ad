import random
import sys
from pathlib import Path

# Keep imports predictable in local runs
sys.path.append(str(Path(__file__).resolve().parent.parent))

import pytest
from fastapi.testclient import TestClient

from core.config import settings
from main import app
from modules.isochrone import IsochroneService, PolygonSynthesizer
from router.utils.deps import get_isochrone_service
from store import RequestCache


class ExplodingSynthesizer(PolygonSynthesizer):
    def synthesize(self, center, range_m):
        raise RuntimeError("engine crashed")


@pytest.fixture
def service():
    fresh = IsochroneService(
        synthesizer=PolygonSynthesizer(rng=random.Random(2024)),
        cache=RequestCache(ttl_s=settings.isochrone_cache_ttl_s),
    )
    app.dependency_overrides[get_isochrone_service] = lambda: fresh
    yield fresh
    app.dependency_overrides.clear()


@pytest.fixture
def client(service):
    return TestClient(app)


def test_foot_walking_end_to_end(client):
    payload = {"locations": [[-0.1, 51.5]], "range": [500], "id": "m1"}
    resp = client.post("/api/isochrones/foot-walking", json=payload)
    assert resp.status_code == 200
    assert resp.headers["cache-control"] == f"public, max-age={settings.isochrone_cache_ttl_s}"

    data = resp.json()
    assert data["type"] == "FeatureCollection"
    assert data["bbox"] == [-180, -90, 180, 90]
    assert len(data["features"]) == 1
    feature = data["features"][0]
    assert feature["properties"]["value"] == 500
    assert feature["properties"]["group_index"] == 0
    assert feature["properties"]["center"] == [-0.1, 51.5]
    ring = feature["geometry"]["coordinates"][0]
    assert len(ring) == 13
    assert ring[0] == ring[-1]
    assert data["metadata"]["query"]["transport"] == "foot-walking"
    assert data["metadata"]["id"] == "m1"


@pytest.mark.parametrize("transport", ["driving-car", "cycling-regular", "foot-walking"])
def test_every_transport_has_an_endpoint(client, transport):
    resp = client.post(
        f"/api/isochrones/{transport}",
        json={"locations": [[2.35, 48.85], [2.40, 48.86]], "range": [300, 600]},
    )
    assert resp.status_code == 200
    data = resp.json()
    assert len(data["features"]) == 4
    assert [f["properties"]["group_index"] for f in data["features"]] == [0, 0, 1, 1]
    assert data["metadata"]["query"]["transport"] == transport
    assert "id" not in data["metadata"]


def test_repeated_request_is_byte_identical(client):
    payload = {"locations": [[-0.1, 51.5]], "range": [500], "id": "m1"}
    first = client.post("/api/isochrones/driving-car", json=payload)
    second = client.post("/api/isochrones/driving-car", json=payload)
    assert first.status_code == second.status_code == 200
    assert first.content == second.content
    assert second.headers["cache-control"].startswith("public")


def test_unknown_transport_is_client_error(client):
    resp = client.post("/api/isochrones/public-transport", json={"locations": [[0, 0]], "range": [1]})
    assert resp.status_code == 422


@pytest.mark.parametrize(
    "payload",
    [
        {"locations": [[-0.1, 51.5]], "range": [0]},
        {"locations": [[-0.1, 51.5]], "range": [-10]},
        {"locations": [], "range": [500]},
        {"locations": [[-0.1, 51.5]], "range": []},
        {"locations": [["x", 51.5]], "range": [500]},
        {"locations": [[-0.1, 91.0]], "range": [500]},
        {"range": [500]},
        {"locations": [["-0.1", "51.5"]], "range": ["500"]},
        {"locations": [[True, False]], "range": [True]},
        {"locations": [[-0.1, 51.5]], "range": ["500"]},
        {"locations": [[0, 90]], "range": [500]},
        {"locations": [[0, -90]], "range": [500]},
    ],
)
def test_invalid_payload_rejected_without_caching(client, service, payload):
    resp = client.post("/api/isochrones/foot-walking", json=payload)
    assert resp.status_code == 422
    assert resp.json()["detail"]
    assert len(service.cache) == 0


def test_unexpected_failure_is_server_error(service):
    service.synthesizer = ExplodingSynthesizer()
    client = TestClient(app)
    resp = client.post("/api/isochrones/foot-walking", json={"locations": [[0, 0]], "range": [100]})
    assert resp.status_code == 500
    assert resp.json()["status"] == "error"
    assert len(service.cache) == 0


def test_synthesis_error_is_server_error(service):
    class NonFiniteSynthesizer(PolygonSynthesizer):
        def synthesize(self, center, range_m):
            return super().synthesize([float("nan"), center[1]], range_m)

    service.synthesizer = NonFiniteSynthesizer()
    client = TestClient(app)
    resp = client.post("/api/isochrones/foot-walking", json={"locations": [[0, 0]], "range": [100]})
    assert resp.status_code == 500
    body = resp.json()
    assert body["status"] == "error"
    assert body["message"] == "Isochrone synthesis failed"


def test_overlaps_endpoint(client):
    markers = [
        {"id": "m1", "location": [-0.1278, 51.5074], "transport": "foot-walking", "range": 1000},
        {"id": "m2", "location": [-0.1260, 51.5074], "transport": "cycling-regular", "range": 1000},
        {"id": "m3", "location": [10.0, 10.0], "transport": "driving-car", "range": 1000},
    ]
    resp = client.post("/api/overlaps", json={"markers": markers})
    assert resp.status_code == 200

    data = resp.json()
    assert data["failed"] == []
    assert [f["properties"]["marker_id"] for f in data["isochrones"]["features"]] == ["m1", "m2", "m3"]
    pairs = [f["properties"]["markers"] for f in data["intersections"]["features"]]
    assert pairs == [["m1", "m2"]]


def test_overlaps_rejects_duplicate_marker_ids(client):
    marker = {"id": "m1", "location": [0.0, 0.0], "transport": "foot-walking", "range": 100}
    resp = client.post("/api/overlaps", json={"markers": [marker, marker]})
    assert resp.status_code == 422


def test_health_reports_cache_size(client):
    client.post("/api/isochrones/foot-walking", json={"locations": [[0, 0]], "range": [100]})
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "healthy"
    assert resp.json()["cache_entries"] == 1


def test_integer_inputs_are_echoed_unchanged(client):
    resp = client.post("/api/isochrones/cycling-regular", json={"locations": [[2, 48]], "range": [500]})
    assert resp.status_code == 200
    data = resp.json()
    assert type(data["features"][0]["properties"]["value"]) is int
    assert data["features"][0]["properties"]["center"] == [2, 48]
    assert data["metadata"]["query"]["range"] == [500]
    assert '"range":[500]' in resp.text


@pytest.mark.parametrize(
    "marker",
    [
        {"id": "m1", "location": ["0", "0"], "transport": "foot-walking", "range": 100},
        {"id": "m1", "location": [0, 0], "transport": "foot-walking", "range": "100"},
        {"id": "m1", "location": [0, 0], "transport": "foot-walking", "range": True},
        {"id": "m1", "location": [0, 90], "transport": "foot-walking", "range": 100},
        {"id": "m1", "location": [0, 0], "transport": "foot-walking", "range": 0},
    ],
)
def test_overlaps_rejects_malformed_markers(client, service, marker):
    resp = client.post("/api/overlaps", json={"markers": [marker]})
    assert resp.status_code == 422
    assert len(service.cache) == 0

"""
Tests for the footprint HTTP endpoint.

These tests use FastAPI's TestClient and override the WebGeocalc client
dependency with a scripted fake, so no request leaves the process.
"""

import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Add the backend directory to sys.path so we can import the app
sys.path.append(str(Path(__file__).resolve().parents[1]))

from footprint.main import app  # type: ignore
from footprint.api.routes_footprint import get_wgc_client  # type: ignore
from footprint.services.errors import UpstreamUnavailableError  # type: ignore

from wgc_fakes import FakeClient


@pytest.fixture
def client():
    yield TestClient(app)
    app.dependency_overrides.clear()


def _use_fake(outcomes) -> FakeClient:
    fake = FakeClient(outcomes)
    app.dependency_overrides[get_wgc_client] = lambda: fake
    return fake


def test_health(client: TestClient) -> None:
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_footprint_success(client: TestClient) -> None:
    """A successful request returns boundary, mesh, counts and perimeter."""
    fake = _use_fake([(0.0, 0.0, 0.25), (0.1, 0.0, 0.25), (0.1, 0.1, 0.25), (0.0, 0.1, 0.25)])
    resp = client.get("/api/footprint", params={"samplesPerEdge": 1, "shape": "ELLIPSOID", "observer": "-64"})
    assert resp.status_code == 200
    data = resp.json()
    assert data["boundaryPointCount"] == 4
    assert data["triangleCount"] == 2
    assert len(data["trianglesMeters"]) == 18
    assert data["boundaryIndices"] == [0, 1, 2, 0, 2, 3]
    assert data["perimeterMeters"] == pytest.approx(400.0)
    assert data["rayCount"] == 4
    assert data["failedRays"] == []
    assert data["boundaryMeters"][1] == pytest.approx({"x": 100.0, "y": 0.0, "z": 250.0})
    # Query parameters flow into the per‑ray requests.
    sent = fake.requests[0].to_payload()
    assert sent["shape1"] == "ELLIPSOID"
    assert sent["observer"] == -64


def test_footprint_too_sparse_returns_structured_error(client: TestClient) -> None:
    outcomes = [UpstreamUnavailableError("Network error while submitting calculation request")] * 8
    outcomes[0] = (1.0, 2.0, 3.0)
    _use_fake(outcomes)
    resp = client.get("/api/footprint")
    assert resp.status_code == 500
    body = resp.json()
    assert body["kind"] == "result_too_sparse"
    assert body["statusCode"] == 500
    assert "boundary size: 1" in body["error"]
    assert body["details"]["rayCount"] == 8
    assert len(body["details"]["failures"]) == 7
    assert body["details"]["failures"][0]["kind"] == "upstream_unavailable"


def test_footprint_rejects_invalid_fov(client: TestClient) -> None:
    fake = _use_fake([])
    resp = client.get("/api/footprint", params={"halfHorizDeg": 0})
    assert resp.status_code == 400
    assert resp.json()["kind"] == "configuration"
    assert fake.requests == []


def test_footprint_rejects_unknown_shape(client: TestClient) -> None:
    _use_fake([])
    resp = client.get("/api/footprint", params={"shape": "SPHERE"})
    assert resp.status_code == 422


def test_footprint_rejects_bad_wgc_environment(client: TestClient, monkeypatch) -> None:
    """Invalid WebGeocalc settings fail as a configuration error, not a crash."""
    monkeypatch.setenv("WGC_POLL_INTERVAL_S", "nan")
    resp = client.get("/api/footprint")
    assert resp.status_code == 400
    body = resp.json()
    assert body["kind"] == "configuration"
    assert "WGC_POLL_INTERVAL_S" in body["error"]

"""Tests for FastAPI routes -- health, info, construct, and sweep."""

from __future__ import annotations

import math

import pytest
from fastapi.testclient import TestClient

from butterfly.main import app
from butterfly.models import Configuration


# ---------------------------------------------------------------------------
# Health / info endpoints
# ---------------------------------------------------------------------------


class TestHealth:
    def test_health(self, client: TestClient) -> None:
        resp = client.get("/health")
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "ok"
        assert data["version"] == "0.1.0"


class TestInfo:
    def test_info_defaults(self, client: TestClient, monkeypatch) -> None:
        monkeypatch.delenv("BUTTERFLY_RADIUS", raising=False)
        resp = client.get("/api/info")
        assert resp.status_code == 200
        data = resp.json()
        assert data["version"] == app.version
        assert data["defaults"]["radius"] == 160
        assert data["defaults"]["angleAB"] == 60
        assert set(data["tolerances"]) == {"vertical", "parallel", "invariant"}

    def test_info_reflects_env(self, client: TestClient, monkeypatch) -> None:
        monkeypatch.setenv("BUTTERFLY_CHORD_OFFSET", "-20")
        data = client.get("/api/info").json()
        assert data["defaults"]["chordOffset"] == -20

    def test_lifespan_starts_with_bad_defaults(self, monkeypatch) -> None:
        """A non-constructible default configuration is logged, not fatal."""
        monkeypatch.setenv("BUTTERFLY_CHORD_OFFSET", "500")
        with TestClient(app) as client:
            assert client.get("/health").status_code == 200


# ---------------------------------------------------------------------------
# POST /api/construct
# ---------------------------------------------------------------------------


class TestConstruct:
    def test_default_body(self, client: TestClient) -> None:
        resp = client.post("/api/construct", json={})
        assert resp.status_code == 200
        data = resp.json()
        assert data["error"] is None
        assert set(data["points"]) == set("PQMABCDXY")
        assert data["points"]["M"] == {"x": 0.0, "y": 50.0}

    def test_camel_case_body(self, client: TestClient) -> None:
        body = {"radius": 100, "chordOffset": 20, "angleAB": 40, "angleCD": 100}
        data = client.post("/api/construct", json=body).json()
        assert data["configuration"] == body
        derived = data["derived"]
        assert derived["xm"] == pytest.approx(derived["my"], rel=1e-6)
        assert derived["pqLength"] == pytest.approx(2 * math.sqrt(100**2 - 20**2))

    def test_snake_case_body(self, client: TestClient) -> None:
        body = Configuration(radius=5, chord_offset=1, angle_ab=10, angle_cd=80).model_dump()
        resp = client.post("/api/construct", json=body)
        assert resp.status_code == 200
        assert resp.json()["configuration"]["chordOffset"] == 1

    def test_invalid_configuration_is_200(self, client: TestClient) -> None:
        resp = client.post("/api/construct", json={"radius": 160, "chordOffset": 170})
        assert resp.status_code == 200
        data = resp.json()
        assert data["points"] is None
        assert data["error"]["kind"] == "InvalidConfiguration"

    def test_undefined_intersection_is_200(self, client: TestClient) -> None:
        resp = client.post("/api/construct", json={"angleAB": 0, "angleCD": 0})
        assert resp.status_code == 200
        data = resp.json()
        assert data["error"]["kind"] == "UndefinedIntersection"
        assert "W03" in {w["id"] for w in data["warnings"]}

    def test_warnings_in_response(self, client: TestClient) -> None:
        data = client.post("/api/construct", json={"angleAB": 60, "angleCD": 60.2}).json()
        assert data["error"] is None
        assert "W02" in {w["id"] for w in data["warnings"]}

    def test_huge_radius_has_no_nulls(self, client: TestClient) -> None:
        resp = client.post("/api/construct", json={"radius": 1e200, "chordOffset": 0})
        assert resp.status_code == 200
        data = resp.json()
        assert data["error"] is None
        for point in data["points"].values():
            assert point["x"] is not None and point["y"] is not None
        assert data["points"]["P"]["x"] == pytest.approx(-1e200)
        assert data["derived"]["xm"] == pytest.approx(data["derived"]["my"], rel=1e-6)

    def test_overflowing_radius_is_an_error_value(self, client: TestClient) -> None:
        resp = client.post("/api/construct", json={"radius": 1.7e308, "chordOffset": 0})
        assert resp.status_code == 200
        assert resp.json()["error"]["kind"] == "OutOfDomain"

    @pytest.mark.parametrize("value", ["inf", "nan", "abc"])
    def test_non_finite_rejected(self, client: TestClient, value: str) -> None:
        resp = client.post("/api/construct", json={"radius": value})
        assert resp.status_code == 422


# ---------------------------------------------------------------------------
# POST /api/sweep
# ---------------------------------------------------------------------------


class TestSweep:
    def test_sweep_angle_ab(self, client: TestClient) -> None:
        body = {"field": "angle_ab", "start": 10, "stop": 170, "count": 17}
        resp = client.post("/api/sweep", json=body)
        assert resp.status_code == 200
        data = resp.json()
        assert data["field"] == "angle_ab"
        assert len(data["angles"]) == 17
        assert data["angles"][0] == 10 and data["angles"][-1] == 170
        assert all(data["valid"])
        assert data["maxResidual"] < 1e-6
        for xm, my in zip(data["xm"], data["my"]):
            assert xm == pytest.approx(my, rel=1e-6, abs=1e-9)

    def test_invalid_samples_are_null(self, client: TestClient) -> None:
        body = {
            "configuration": {"angleAB": 0},
            "field": "angle_cd",
            "start": 0,
            "stop": 90,
            "count": 10,
        }
        data = client.post("/api/sweep", json=body).json()
        assert data["valid"][0] is False
        assert data["xm"][0] is None
        assert data["x"][0] is None
        assert all(data["valid"][1:])

    def test_all_invalid(self, client: TestClient) -> None:
        body = {"configuration": {"radius": 1, "chordOffset": 2}, "count": 3}
        data = client.post("/api/sweep", json=body).json()
        assert data["valid"] == [False, False, False]
        assert data["maxResidual"] is None

    def test_count_too_large(self, client: TestClient) -> None:
        resp = client.post("/api/sweep", json={"count": 5000})
        assert resp.status_code == 422

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from lcal.api.app import app


@pytest.fixture()
def client() -> TestClient:
    return TestClient(app)


def test_lunar_endpoint(client):
    res = client.get("/api/v1/lunar", params={"date": "2018-07-18", "tz": 7})
    assert res.status_code == 200
    body = res.json()
    assert body["date"] == "2018-07-18"
    assert (body["year"], body["month"], body["day"], body["is_leap"]) == (2018, 6, 6, False)


def test_lunar_endpoint_default_tz_from_env(client, monkeypatch):
    monkeypatch.setenv("LCAL_TZ_OFFSET", "7")
    res = client.get("/api/v1/lunar", params={"date": "2020-05-23"})
    assert res.status_code == 200
    body = res.json()
    assert body["tz"] == 7.0
    assert (body["month"], body["day"], body["is_leap"]) == (4, 1, True)


def test_lunar_endpoint_rejects_bad_date(client):
    res = client.get("/api/v1/lunar", params={"date": "2018-13-01", "tz": 7})
    assert res.status_code == 422
    assert "Invalid date format" in res.json()["detail"]


def test_solar_endpoint(client):
    res = client.get("/api/v1/solar", params={"year": 2020, "month": 4, "day": 1, "leap": "true", "tz": 7})
    assert res.status_code == 200
    assert res.json()["date"] == "2020-05-23"


def test_solar_endpoint_invalid_leap_month(client):
    res = client.get("/api/v1/solar", params={"year": 2020, "month": 5, "day": 1, "leap": "true", "tz": 7})
    assert res.status_code == 422
    assert "leap month 4" in res.json()["detail"]


def test_solar_endpoint_validates_query(client):
    res = client.get("/api/v1/solar", params={"year": 2020, "month": 13, "day": 1, "tz": 7})
    assert res.status_code == 422


def test_lunar_year_endpoint(client):
    res = client.get("/api/v1/lunar-year", params={"year": 2020, "tz": 7})
    assert res.status_code == 200
    body = res.json()
    assert body["leap_month"] == 4
    assert len(body["months"]) == 13
    assert body["months"][0]["start"] == "2020-01-25"
    assert body["months"][4] == {"month": 4, "is_leap": True, "start": "2020-05-23", "days": 29}

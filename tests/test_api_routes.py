"""
Tests des routes HTTP (identité, contenu, ciel) via TestClient.

Le conteneur global est branché sur un dépôt en mémoire et sur la Lune moyenne pour des réponses
déterministes; les erreurs sont vérifiées au niveau de l'enveloppe `{code, message, trace_id}`.
"""

from __future__ import annotations

from unittest.mock import Mock

import pytest
from fastapi.testclient import TestClient

from astrocusp.app.main import app
from astrocusp.core.container import container
from astrocusp.core.http_constants import (
    HTTP_NOT_FOUND,
    HTTP_OK,
    HTTP_SERVICE_UNAVAILABLE,
    HTTP_UNPROCESSABLE_ENTITY,
)
from astrocusp.domain.daily_resolver import DailyContentResolver, MonthlyForecastResolver
from astrocusp.domain.errors import StoreUnavailable
from astrocusp.infra.repositories import InMemoryDailyCache
from astrocusp.services.content import ContentService
from astrocusp.services.sky import SkyService

AT = "2025-11-01T00:00:00Z"
TRACKED_PLANETS = 9


def _content(store) -> ContentService:
    return ContentService(
        daily=DailyContentResolver(store),
        monthly=MonthlyForecastResolver(store),
        cache=InMemoryDailyCache(ttl_seconds=60),
    )


@pytest.fixture
def client(monkeypatch, content_store, mean_moon) -> TestClient:
    monkeypatch.setattr(container, "content", _content(content_store))
    monkeypatch.setattr(container, "sky", SkyService(mean_moon))
    return TestClient(app)


def test_health(client: TestClient) -> None:
    """Teste que l'endpoint de santé retourne un statut OK."""
    r = client.get("/health")
    assert r.status_code == HTTP_OK
    assert r.json()["status"] == "ok"


def test_request_id_is_echoed(client: TestClient) -> None:
    r = client.get("/health", headers={"X-Request-ID": "trace-123"})
    assert r.headers["X-Request-ID"] == "trace-123"
    assert "X-Process-Time-ms" in r.headers


def test_identity_cusp(client: TestClient) -> None:
    r = client.post("/identity/cusp", json={"date": "1990-07-21", "time": "10:00"})
    assert r.status_code == HTTP_OK
    body = r.json()
    assert body["is_on_cusp"] is True
    assert body["cusp_name"] == "Cancer–Leo Cusp"
    assert body["effective_sign"] == "Cancer–Leo Cusp"
    assert body["slug"] == "cancer-leo-cusp"


def test_identity_invalid_date_envelope(client: TestClient) -> None:
    r = client.post(
        "/identity/cusp",
        json={"date": "1990-02-30", "time": "10:00"},
        headers={"X-Request-ID": "trace-422"},
    )
    assert r.status_code == HTTP_UNPROCESSABLE_ENTITY
    body = r.json()
    assert body["code"] == "INVALID_DATE"
    assert body["trace_id"] == "trace-422"
    assert body["details"]["value"] == "1990-02-30"


def test_identity_rising(client: TestClient) -> None:
    r = client.post("/identity/rising", json={"date": "2024-04-09", "time": "12:30"})
    assert r.status_code == HTTP_OK
    assert r.json()["sign"] == "Capricorn"


def test_daily_content_found(client: TestClient) -> None:
    r = client.get(
        "/content/daily",
        params={"sign": "Aries–Taurus Cusp", "hemisphere": "Northern", "day": "2025-04-20"},
    )
    assert r.status_code == HTTP_OK
    assert r.json()["sign"] == "ARIES-TAURUS CUSP"


def test_daily_content_not_found_envelope(client: TestClient) -> None:
    """Un signe pur ne reçoit jamais la ligne de cuspide: 404, pas 503."""
    r = client.get(
        "/content/daily", params={"sign": "Aries", "hemisphere": "NH", "day": "2025-04-20"}
    )
    assert r.status_code == HTTP_NOT_FOUND
    assert r.json()["code"] == "CONTENT_NOT_FOUND"


def test_daily_content_store_unavailable(client: TestClient, monkeypatch) -> None:
    store = Mock()
    store.find_daily_rows.side_effect = StoreUnavailable("down")
    monkeypatch.setattr(container, "content", _content(store))
    r = client.get(
        "/content/daily", params={"sign": "Leo", "hemisphere": "NH", "day": "2025-04-20"}
    )
    assert r.status_code == HTTP_SERVICE_UNAVAILABLE
    assert r.json()["code"] == "STORE_UNAVAILABLE"


def test_daily_content_invalid_day(client: TestClient) -> None:
    r = client.get("/content/daily", params={"sign": "Leo", "day": "2025-02-30"})
    assert r.status_code == HTTP_UNPROCESSABLE_ENTITY
    assert r.json()["code"] == "INVALID_DATE"


def test_monthly_forecast(client: TestClient) -> None:
    r = client.get(
        "/content/monthly", params={"sign": "Aries", "hemisphere": "NH", "month": "2025-04"}
    )
    assert r.status_code == HTTP_OK
    assert r.json()["monthly_forecast"] == "A month to start, then to finish."

    bad = client.get("/content/monthly", params={"sign": "Aries", "month": "2025-13"})
    assert bad.status_code == HTTP_UNPROCESSABLE_ENTITY
    assert bad.json()["code"] == "INVALID_DATE"


def test_sky_planets(client: TestClient) -> None:
    r = client.get("/sky/planets", params={"at": AT})
    assert r.status_code == HTTP_OK
    body = r.json()
    assert len(body["positions"]) == TRACKED_PLANETS
    assert body["stale_model"] is False


def test_sky_planets_stale(client: TestClient) -> None:
    r = client.get("/sky/planets", params={"at": "2030-01-01T00:00:00Z"})
    assert r.status_code == HTTP_OK
    assert r.json()["stale_model"] is True


def test_sky_moon(client: TestClient) -> None:
    r = client.get("/sky/moon", params={"at": AT})
    assert r.status_code == HTTP_OK
    body = r.json()
    assert 0 <= body["illumination_percent"] <= 100
    assert body["next_phase_name"] in {"New Moon", "First Quarter", "Full Moon", "Last Quarter"}


def test_sky_events_short_hemisphere(client: TestClient) -> None:
    r = client.get("/sky/events", params={"hemisphere": "SH", "at": AT})
    assert r.status_code == HTTP_OK
    body = r.json()
    assert body["hemisphere"] == "Southern"
    dates = [e["date"] for e in body["events"]]
    assert dates == sorted(dates)
    assert any(e["name"] == "Southern sky highlight" for e in body["events"])


def test_sky_insight(client: TestClient) -> None:
    r = client.get("/sky/insight", params={"hemisphere": "Southern", "at": AT})
    assert r.status_code == HTTP_OK
    body = r.json()
    assert "Southern Cross" in body["insight"]
    assert body["constellations"][0] == "Southern Cross"


def test_metrics_exposed(client: TestClient) -> None:
    client.get("/content/daily", params={"sign": "Aries", "hemisphere": "NH", "day": "2025-04-20"})
    r = client.get("/metrics")
    assert r.status_code == HTTP_OK
    assert b"daily_content_lookups_total" in r.content

"""Integration tests for API endpoints"""

from unittest.mock import AsyncMock, patch
from datetime import date, timedelta
from fastapi.testclient import TestClient
from yen_tracker.domain.exceptions import RateSourceError

FETCH_RATE = "yen_tracker.infrastructure.clients.frankfurter.RateClient.fetch_current_rate"
FETCH_HISTORY = "yen_tracker.infrastructure.clients.frankfurter.RateClient.fetch_historical_rates"

DEFAULT_SETTINGS = {
    "aggressive_above": 200,
    "normal_above": 190,
    "hold_above": 175,
    "cap_aggressive_gbp": 200000,
    "cap_normal_gbp": 100000,
    "total_gbp_savings_pence": 5000000,
    "max_fx_exposure_pct": 80,
    "monthly_jpy_expenses": 250000,
    "monthly_jpy_salary_net": 300000,
    "nisa_monthly_jpy": 100000,
    "nisa_return_pct": 5,
    "circuit_breaker_loss_pence": 500000,
    "gbp_safety_net_months": 6,
    "scenario_best_rate": 210,
    "scenario_base_rate": 190,
    "scenario_worst_rate": 170,
    "review_interval_days": 90,
}


def _log_conversion(client: TestClient, **overrides) -> dict:
    body = {
        "date": "2024-01-15",
        "direction": "GBP_TO_JPY",
        "gbp_pence": 100000,
        "jpy_amount": 190000,
        "rate": 190.0,
    }
    body.update(overrides)
    response = client.post("/v1/conversions", json=body)
    assert response.status_code == 201
    return response.json()


def test_health_endpoint(client: TestClient):
    """Test health check endpoint"""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_metrics_endpoint(client: TestClient):
    """Test Prometheus metrics endpoint"""
    response = client.get("/metrics")
    assert response.status_code == 200
    assert "yen_tracker_band_evaluations_total" in response.text


def test_settings_defaults_created_on_first_read(client: TestClient):
    response = client.get("/v1/settings")

    assert response.status_code == 200
    data = response.json()
    assert data["id"] == 1
    assert data["aggressive_above"] == 200
    assert data["hold_above"] == 175
    assert data["last_band_review"] is None


def test_settings_replace(client: TestClient):
    body = {**DEFAULT_SETTINGS, "aggressive_above": 205, "last_band_review": "2024-06-01"}

    response = client.put("/v1/settings", json=body)

    assert response.status_code == 200
    assert response.json()["aggressive_above"] == 205
    assert client.get("/v1/settings").json()["last_band_review"] == "2024-06-01"


def test_settings_rejects_misordered_thresholds(client: TestClient):
    response = client.put("/v1/settings", json={**DEFAULT_SETTINGS, "hold_above": 195})

    assert response.status_code == 422
    assert client.get("/v1/settings").json()["hold_above"] == 175


def test_conversion_lifecycle(client: TestClient):
    created = _log_conversion(client, notes="first transfer")

    assert created["gbp_amount"] == 100000
    assert created["exchange_rate"] == 190.0
    assert created["provider"] == "WISE"
    assert created["fee_pct"] == 0

    newer = _log_conversion(client, date="2024-02-15", gbp_pence=50000, jpy_amount=96000, rate=192.0)
    listed = client.get("/v1/conversions").json()
    assert [c["id"] for c in listed] == [newer["id"], created["id"]]

    assert client.delete(f"/v1/conversions/{created['id']}").json() == {"success": True}
    assert client.delete(f"/v1/conversions/{created['id']}").status_code == 404
    assert len(client.get("/v1/conversions").json()) == 1


def test_conversion_validation(client: TestClient):
    response = client.post(
        "/v1/conversions",
        json={"date": "2024-01-15", "direction": "GBP_TO_JPY", "gbp_pence": 0, "jpy_amount": 1, "rate": 190},
    )
    assert response.status_code == 422


@patch(FETCH_RATE)
def test_rates_classifies_band_and_raises_alerts(mock_rate: AsyncMock, client: TestClient, live_rate):
    """First look at the rate: band change plus recalibration (never reviewed)"""
    mock_rate.return_value = live_rate(195.0)

    response = client.get("/v1/rates")

    assert response.status_code == 200
    data = response.json()
    assert data["rate"]["rate"] == 195.0
    assert data["fallback"] is False
    assert data["band"]["band"] == "NORMAL_BUY"
    assert data["band"]["thresholds"] == {"aggressive_above": 200, "normal_above": 190, "hold_above": 175}
    assert data["circuit_breaker"]["triggered"] is False
    assert data["circuit_breaker"]["message"] == "No conversions to monitor."
    assert sorted(a["type"] for a in data["alerts"]) == ["band_change", "recalibrate"]

    # Same band again: nothing new
    second = client.get("/v1/rates").json()
    assert len(second["alerts"]) == 2


@patch(FETCH_RATE)
def test_rates_reverse_zone_alert(mock_rate: AsyncMock, client: TestClient, live_rate):
    mock_rate.return_value = live_rate(170.0)

    data = client.get("/v1/rates").json()

    assert data["band"]["band"] == "REVERSE"
    assert "reverse_zone" in [a["type"] for a in data["alerts"]]


@patch(FETCH_RATE)
def test_rates_circuit_breaker_trips(mock_rate: AsyncMock, client: TestClient, live_rate):
    # ¥1,900,000 bought with £10,000 is worth £9,500 at 200 - a £500 loss
    _log_conversion(client, gbp_pence=1000000, jpy_amount=1900000)
    client.put("/v1/settings", json={**DEFAULT_SETTINGS, "circuit_breaker_loss_pence": 10000})
    mock_rate.return_value = live_rate(200.0)

    data = client.get("/v1/rates").json()

    assert data["circuit_breaker"]["triggered"] is True
    assert data["circuit_breaker"]["current_loss"] == -50000
    assert "circuit_breaker" in [a["type"] for a in data["alerts"]]


@patch(FETCH_RATE)
def test_rates_falls_back_to_cache(mock_rate: AsyncMock, client: TestClient, live_rate):
    mock_rate.return_value = live_rate(195.0)
    client.get("/v1/rates")

    mock_rate.side_effect = RateSourceError("Rate API timeout after 5.0s")
    response = client.get("/v1/rates")

    assert response.status_code == 200
    data = response.json()
    assert data["fallback"] is True
    assert data["rate"]["rate"] == 195.0


@patch(FETCH_RATE)
def test_rates_unavailable_without_cache(mock_rate: AsyncMock, client: TestClient):
    mock_rate.side_effect = RateSourceError("Rate API unreachable")

    response = client.get("/v1/rates")

    assert response.status_code == 503


@patch(FETCH_RATE)
def test_thermostat_for_month(mock_rate: AsyncMock, client: TestClient, live_rate):
    mock_rate.return_value = live_rate(195.0)
    _log_conversion(client, date="2024-01-15", gbp_pence=40000, jpy_amount=76000)
    _log_conversion(client, date="2024-02-01", gbp_pence=30000, jpy_amount=57000)

    response = client.get("/v1/thermostat", params={"month": "2024-01"})

    assert response.status_code == 200
    thermostat = response.json()["thermostat"]
    assert thermostat["band"] == "NORMAL_BUY"
    assert thermostat["monthly_cap"] == 100000
    assert thermostat["converted_this_month"] == 40000
    assert thermostat["remaining_budget"] == 60000
    assert thermostat["suggested_amount"] == 60000
    assert thermostat["at_cap"] is False
    assert thermostat["over_exposed"] is False
    assert thermostat["suggestion"] == "Convert up to £600.00 more this month (£400.00 of £1,000.00 used)."


@patch(FETCH_RATE)
def test_thermostat_rejects_malformed_month(mock_rate: AsyncMock, client: TestClient, live_rate):
    mock_rate.return_value = live_rate(195.0)

    response = client.get("/v1/thermostat", params={"month": "2024-13"})

    assert response.status_code == 400


@patch(FETCH_RATE)
def test_thermostat_rejects_out_of_range_year(mock_rate: AsyncMock, client: TestClient, live_rate):
    mock_rate.return_value = live_rate(195.0)

    for month in ("0000-01", "9999-12"):
        response = client.get("/v1/thermostat", params={"month": month})
        assert response.status_code == 400


@patch(FETCH_RATE)
def test_thermostat_checks_month_before_fetching_rate(mock_rate: AsyncMock, client: TestClient):
    """A bad month is a 400 even when no rate could be resolved"""
    mock_rate.side_effect = RateSourceError("Rate API unreachable")

    response = client.get("/v1/thermostat", params={"month": "2024-13"})

    assert response.status_code == 400
    mock_rate.assert_not_awaited()


@patch(FETCH_RATE)
def test_portfolio(mock_rate: AsyncMock, client: TestClient, live_rate):
    mock_rate.return_value = live_rate(200.0)
    _log_conversion(client, gbp_pence=100000, jpy_amount=190000)

    data = client.get("/v1/portfolio").json()

    assert data["conversion_count"] == 1
    assert data["total_jpy_acquired"] == 190000
    assert data["current_value_gbp"] == 95000
    assert data["unrealised_pnl_gbp"] == -5000
    assert data["current_rate"] == 200.0


@patch(FETCH_RATE)
def test_projections(mock_rate: AsyncMock, client: TestClient, live_rate):
    mock_rate.return_value = live_rate(195.0)
    _log_conversion(client, gbp_pence=1000000, jpy_amount=1900000)

    response = client.get("/v1/projections")

    assert response.status_code == 200
    data = response.json()
    assert data["current_rate"] == 195.0
    assert data["break_even_rate"] == 190.0
    # £50,000 savings less £10,000 deployed
    assert data["scenarios"]["base"]["total_jpy_if_convert_now"] == 7600000
    assert data["strategy_comparison"]["lump_sum"]["total_jpy"] == 7800000
    assert len(data["nisa_projection"]["years"]) == 20
    assert data["range_52_week"]["high"] == 195.0
    assert data["range_52_week"]["percentile"] == 50
    assert [p["rate"] for p in data["rate_history"]] == [195.0]


@patch(FETCH_RATE)
def test_alert_acknowledgement(mock_rate: AsyncMock, client: TestClient, live_rate):
    mock_rate.return_value = live_rate(195.0)
    client.get("/v1/rates")

    open_alerts = client.get("/v1/alerts").json()["alerts"]
    assert len(open_alerts) == 2

    response = client.post("/v1/alerts/acknowledge", json={"id": open_alerts[0]["id"]})
    assert response.json()["success"] is True
    assert len(client.get("/v1/alerts").json()["alerts"]) == 1

    client.post("/v1/alerts/acknowledge", json={"all": True})
    assert client.get("/v1/alerts").json()["alerts"] == []

    history = client.get("/v1/alerts", params={"all": "true"}).json()["alerts"]
    assert len(history) == 2
    assert all(a["acknowledged"] for a in history)


def test_acknowledge_requires_id_or_all(client: TestClient):
    response = client.post("/v1/alerts/acknowledge", json={})
    assert response.status_code == 400


@patch(FETCH_HISTORY)
def test_backfill_then_history(mock_history: AsyncMock, client: TestClient):
    today = date.today()
    mock_history.return_value = {
        today - timedelta(days=3): 188.5,
        today - timedelta(days=2): 190.25,
    }

    response = client.post("/v1/rates/backfill", params={"days": 7})

    assert response.status_code == 200
    assert response.json()["cached"] == 2

    history = client.get("/v1/rates/history", params={"days": 7}).json()
    assert [p["rate"] for p in history] == [188.5, 190.25]
    assert client.get("/v1/rates/history", params={"days": 1}).json() == []


@patch(FETCH_HISTORY)
def test_backfill_source_failure(mock_history: AsyncMock, client: TestClient):
    mock_history.side_effect = RateSourceError("Rate API error: 500")

    response = client.post("/v1/rates/backfill", params={"days": 7})

    assert response.status_code == 503


def test_export_csv_for_uk_tax_year(client: TestClient):
    _log_conversion(client, date="2024-05-01", notes="in year")
    _log_conversion(client, date="2024-04-05", notes="previous year")

    response = client.get("/v1/export/csv", params={"tax_year": "2024-2025", "tax_system": "uk"})

    assert response.status_code == 200
    assert 'filename="yen-tracker-uk-2024-2025.csv"' in response.headers["content-disposition"]
    lines = response.text.splitlines()
    assert lines[0] == "Date,Direction,GBP Amount,JPY Amount,Exchange Rate,Spot Rate,Fee %,Provider,Band,Notes"
    assert len(lines) == 2
    assert lines[1].startswith("2024-05-01,GBP_TO_JPY,1000.00,190000,190.0")


def test_export_backup(client: TestClient):
    _log_conversion(client)

    response = client.get("/v1/export/backup")

    assert response.status_code == 200
    data = response.json()
    assert data["metadata"]["version"] == "1.0.0"
    assert data["metadata"]["tables"]["conversions"] == 1
    assert data["metadata"]["tables"]["settings"] == 1
    assert data["conversions"][0]["date"] == "2024-01-15"


def test_export_csv_with_oversized_tax_year_exports_everything(client: TestClient):
    _log_conversion(client, date="2024-05-01")
    _log_conversion(client, date="2023-05-01")

    response = client.get("/v1/export/csv", params={"tax_year": "99999999999999999999", "tax_system": "jp"})

    assert response.status_code == 200
    assert len(response.text.splitlines()) == 3

"""Unit tests for settings and conversion input validation"""

import pytest
from datetime import date
from pydantic import ValidationError
from yen_tracker.api.v1.schemas import ConversionCreate, SettingsUpdate
from yen_tracker.domain.models import Direction, StrategySettings

VALID_SETTINGS = {
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

VALID_CONVERSION = {
    "date": "2024-01-15",
    "direction": "GBP_TO_JPY",
    "gbp_pence": 100000,
    "jpy_amount": 190000,
    "rate": 190.0,
}


def test_valid_settings_map_to_domain():
    settings = SettingsUpdate(**VALID_SETTINGS, last_band_review="2024-03-01").to_domain()

    assert isinstance(settings, StrategySettings)
    assert settings.hold_above == 175
    assert settings.last_band_review == date(2024, 3, 1)


def test_normal_may_equal_aggressive():
    SettingsUpdate(**{**VALID_SETTINGS, "normal_above": 200})


@pytest.mark.parametrize(
    "overrides",
    [
        {"hold_above": 190},  # hold must be strictly below normal
        {"hold_above": 195},
        {"normal_above": 205},  # normal above aggressive
        {"aggressive_above": 0},
        {"cap_normal_gbp": 0},
        {"max_fx_exposure_pct": 101},
        {"nisa_return_pct": -1},
        {"gbp_safety_net_months": 0},
        {"review_interval_days": 0},
        {"circuit_breaker_loss_pence": 0},
    ],
)
def test_invalid_settings_rejected(overrides):
    with pytest.raises(ValidationError):
        SettingsUpdate(**{**VALID_SETTINGS, **overrides})


def test_valid_conversion():
    body = ConversionCreate(**VALID_CONVERSION, fee_pct=100, provider="REVOLUT", notes="x" * 500)

    assert body.direction == Direction.GBP_TO_JPY
    assert body.date == date(2024, 1, 15)
    assert body.spot_rate is None


@pytest.mark.parametrize(
    "overrides",
    [
        {"gbp_pence": 0},
        {"jpy_amount": -1},
        {"gbp_pence": 100.5},
        {"rate": 0},
        {"spot_rate": 0},
        {"fee_pct": 100.1},
        {"direction": "USD_TO_JPY"},
        {"provider": "PAYPAL"},
        {"band_at_time": "SELL"},
        {"notes": "x" * 501},
        {"date": "15/01/2024"},
    ],
)
def test_invalid_conversion_rejected(overrides):
    with pytest.raises(ValidationError):
        ConversionCreate(**{**VALID_CONVERSION, **overrides})

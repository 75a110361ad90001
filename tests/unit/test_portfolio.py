"""Unit tests for portfolio aggregation"""

import pytest
from yen_tracker.domain.models import Direction
from yen_tracker.domain.portfolio import (
    calculate_net_position,
    calculate_portfolio_summary,
    calculate_weighted_avg_rate,
)


def test_empty_portfolio_is_all_zero():
    summary = calculate_portfolio_summary([], 0)

    assert summary.total_gbp_converted == 0
    assert summary.net_gbp_deployed == 0
    assert summary.total_jpy_acquired == 0
    assert summary.weighted_avg_rate == 0
    assert summary.current_rate == 0
    assert summary.current_value_gbp == 0
    assert summary.unrealised_pnl_gbp == 0
    assert summary.unrealised_pnl_pct == 0
    assert summary.conversion_count == 0


def test_reversal_reduces_net_position(make_conversion):
    """£1000 -> ¥190,000 then ¥95,000 -> £500 back"""
    records = [
        make_conversion(gbp_amount=100000, jpy_amount=190000, exchange_rate=190),
        make_conversion(direction=Direction.JPY_TO_GBP, gbp_amount=50000, jpy_amount=95000, exchange_rate=190),
    ]

    summary = calculate_portfolio_summary(records, 190)

    assert summary.total_gbp_converted == 100000
    assert summary.net_gbp_deployed == 50000
    assert summary.total_jpy_acquired == 95000
    assert summary.current_value_gbp == 50000
    assert summary.unrealised_pnl_gbp == 0
    assert summary.conversion_count == 2


def test_weighted_avg_rate_uses_outbound_conversions_only(make_conversion):
    records = [
        make_conversion(gbp_amount=100000, exchange_rate=190),
        make_conversion(gbp_amount=300000, exchange_rate=200),
        make_conversion(direction=Direction.JPY_TO_GBP, gbp_amount=50000, exchange_rate=150),
    ]

    assert calculate_weighted_avg_rate(records) == pytest.approx(197.5)


def test_weighted_avg_rate_without_outbound_conversions(make_conversion):
    records = [make_conversion(direction=Direction.JPY_TO_GBP)]
    assert calculate_weighted_avg_rate(records) == 0


def test_unrealised_profit(make_conversion):
    """¥200,000 bought for £1000 is worth £1052.63 at 190"""
    records = [make_conversion(gbp_amount=100000, jpy_amount=200000, exchange_rate=200)]

    summary = calculate_portfolio_summary(records, 190)

    assert summary.current_value_gbp == 105263
    assert summary.unrealised_pnl_gbp == 5263
    assert summary.unrealised_pnl_pct == pytest.approx(5.263)


def test_zero_rate_values_holdings_at_zero(make_conversion):
    records = [make_conversion(gbp_amount=100000, jpy_amount=190000)]

    summary = calculate_portfolio_summary(records, 0)

    assert summary.current_value_gbp == 0
    assert summary.unrealised_pnl_gbp == -100000
    assert summary.unrealised_pnl_pct == -100


@pytest.mark.parametrize("rate", [0, 150.0, 190.0, 212.34])
def test_pnl_is_value_minus_deployed(make_conversion, rate):
    records = [
        make_conversion(gbp_amount=123456, jpy_amount=234567, exchange_rate=190),
        make_conversion(direction=Direction.JPY_TO_GBP, gbp_amount=20000, jpy_amount=41000, exchange_rate=205),
    ]

    summary = calculate_portfolio_summary(records, rate)

    assert summary.unrealised_pnl_gbp == summary.current_value_gbp - summary.net_gbp_deployed


def test_net_position(make_conversion):
    records = [
        make_conversion(gbp_amount=300000, jpy_amount=570000),
        make_conversion(direction=Direction.JPY_TO_GBP, gbp_amount=100000, jpy_amount=200000),
    ]

    position = calculate_net_position(records)

    assert position.net_gbp_deployed == 200000
    assert position.net_jpy_held == 370000

"""Portfolio aggregation - net positions, weighted average rate and unrealised P&L"""

from typing import List

from yen_tracker.domain.currency import convert_jpy_to_gbp
from yen_tracker.domain.models import ConversionRecord, Direction, NetPosition, PortfolioSummary


def _outbound(records: List[ConversionRecord]) -> List[ConversionRecord]:
    return [r for r in records if r.direction == Direction.GBP_TO_JPY]


def _reversals(records: List[ConversionRecord]) -> List[ConversionRecord]:
    return [r for r in records if r.direction == Direction.JPY_TO_GBP]


def calculate_net_position(records: List[ConversionRecord]) -> NetPosition:
    """
    Fold conversions into capital currently at risk.

    Reversals (JPY_TO_GBP) reduce both the GBP deployed and the JPY held.
    """
    outbound = _outbound(records)
    reversals = _reversals(records)

    net_gbp = sum(r.gbp_amount for r in outbound) - sum(r.gbp_amount for r in reversals)
    net_jpy = sum(r.jpy_amount for r in outbound) - sum(r.jpy_amount for r in reversals)

    return NetPosition(net_gbp_deployed=net_gbp, net_jpy_held=net_jpy)


def current_value_pence(jpy_held: int, current_rate: float) -> int:
    """Value of held JPY in pence at the current rate, 0 when the rate is 0"""
    return convert_jpy_to_gbp(jpy_held, current_rate) if current_rate > 0 else 0


def calculate_weighted_avg_rate(records: List[ConversionRecord]) -> float:
    """GBP-weighted mean rate over GBP_TO_JPY conversions, 0 if there are none"""
    outbound = _outbound(records)
    total_gbp = sum(r.gbp_amount for r in outbound)
    if total_gbp == 0:
        return 0.0
    return sum(r.exchange_rate * r.gbp_amount for r in outbound) / total_gbp


def calculate_portfolio_summary(records: List[ConversionRecord], current_rate: float) -> PortfolioSummary:
    """
    Summarise all conversions at the given rate.

    Empty input yields an all-zero summary rather than None.
    """
    position = calculate_net_position(records)
    total_gbp_converted = sum(r.gbp_amount for r in _outbound(records))

    value = current_value_pence(position.net_jpy_held, current_rate)
    pnl = value - position.net_gbp_deployed
    pnl_pct = (pnl / position.net_gbp_deployed) * 100 if position.net_gbp_deployed > 0 else 0.0

    return PortfolioSummary(
        total_gbp_converted=total_gbp_converted,
        net_gbp_deployed=position.net_gbp_deployed,
        total_jpy_acquired=position.net_jpy_held,
        weighted_avg_rate=calculate_weighted_avg_rate(records),
        current_rate=current_rate,
        current_value_gbp=value,
        unrealised_pnl_gbp=pnl,
        unrealised_pnl_pct=pnl_pct,
        conversion_count=len(records),
    )

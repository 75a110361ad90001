"""Projection engine - rate scenarios, break-even, strategy comparison and 52-week range"""

from typing import List, Optional

from yen_tracker.domain.currency import round_half_up
from yen_tracker.domain.models import (
    RateHistoryPoint,
    RateRange,
    ScenarioResult,
    Scenarios,
    StrategyComparison,
    StrategyResult,
    StrategySettings,
)

# Illustrative only: assumes 60% of thermostat conversions land at the best-case rate
THERMOSTAT_BEST_WEIGHT = 0.6
THERMOSTAT_BASE_WEIGHT = 0.4


def _scenario(label: str, rate: float, remaining_gbp_pence: int, monthly_jpy_expenses: int) -> ScenarioResult:
    total_jpy = round_half_up((remaining_gbp_pence / 100) * rate)
    months_covered = total_jpy // monthly_jpy_expenses if monthly_jpy_expenses > 0 else 0
    return ScenarioResult(
        label=label,
        rate=rate,
        total_jpy_if_convert_now=total_jpy,
        monthly_jpy_budget=months_covered,
        jpy_per_pound=rate,
    )


def calculate_scenarios(
    settings: StrategySettings,
    remaining_gbp_pence: int,
    monthly_jpy_expenses: int,
) -> Scenarios:
    """
    What the remaining (unconverted) GBP would buy at each scenario rate,
    and how many months of JPY expenses that covers.
    """
    return Scenarios(
        best=_scenario("Best Case", settings.scenario_best_rate, remaining_gbp_pence, monthly_jpy_expenses),
        base=_scenario("Base Case", settings.scenario_base_rate, remaining_gbp_pence, monthly_jpy_expenses),
        worst=_scenario("Worst Case", settings.scenario_worst_rate, remaining_gbp_pence, monthly_jpy_expenses),
    )


def calculate_break_even(total_jpy_held: int, net_gbp_deployed_pence: int) -> float:
    """
    Rate at which held JPY converts back to exactly the net GBP deployed.

    Example: ¥1,900,000 held for £10,000 deployed -> 190.0
    """
    if net_gbp_deployed_pence <= 0:
        return 0.0
    return total_jpy_held / (net_gbp_deployed_pence / 100)


def _format_whole_pounds(pence: float) -> str:
    return f"£{pence / 100:,.0f}"


def compare_strategies(
    gbp_to_convert_pence: int,
    current_rate: float,
    settings: StrategySettings,
    months: int = 12,
) -> StrategyComparison:
    """
    Compare three ways of converting the same GBP amount:

    1. Lump sum: everything now at the current rate (High risk)
    2. Monthly drip: equal monthly amounts, base scenario rate as the average (Low risk)
    3. Thermostat: weighted between base and best rates, since it converts
       more when the rate is favourable (Medium risk)

    These are illustrative projections, not predictions.
    """
    gbp_pounds = gbp_to_convert_pence / 100

    drip_rate = settings.scenario_base_rate
    thermostat_rate = (
        settings.scenario_base_rate * THERMOSTAT_BASE_WEIGHT
        + settings.scenario_best_rate * THERMOSTAT_BEST_WEIGHT
    )
    monthly_pence = round_half_up(gbp_to_convert_pence / months) if months > 0 else gbp_to_convert_pence

    return StrategyComparison(
        lump_sum=StrategyResult(
            label="Lump Sum",
            description=f"Convert all {_format_whole_pounds(gbp_to_convert_pence)} now at {current_rate:.2f}",
            total_jpy=round_half_up(gbp_pounds * current_rate),
            avg_rate=current_rate,
            risk_level="High",
        ),
        monthly_drip=StrategyResult(
            label="Monthly Drip",
            description=f"Convert {_format_whole_pounds(monthly_pence)} monthly over {months} months",
            total_jpy=round_half_up(gbp_pounds * drip_rate),
            avg_rate=drip_rate,
            risk_level="Low",
        ),
        thermostat=StrategyResult(
            label="Thermostat (This Strategy)",
            description="Convert more when rate is favourable, hold when not",
            total_jpy=round_half_up(gbp_pounds * thermostat_rate),
            avg_rate=thermostat_rate,
            risk_level="Medium",
        ),
    )


def calculate_52_week_range(history: List[RateHistoryPoint], current_rate: float) -> Optional[RateRange]:
    """
    High/low over a chronologically ordered history and the current rate's
    percentile within that range.

    The first occurrence of the high (or low) keeps its date on ties.
    A flat or single-point history puts the current rate at the 50th
    percentile; an empty history returns None.
    """
    if not history:
        return None

    first = history[0]
    high, high_date = first.rate, first.date
    low, low_date = first.rate, first.date

    for point in history:
        if point.rate > high:
            high, high_date = point.rate, point.date
        if point.rate < low:
            low, low_date = point.rate, point.date

    spread = high - low
    percentile = ((current_rate - low) / spread) * 100 if spread > 0 else 50.0

    return RateRange(
        high=high,
        low=low,
        high_date=high_date,
        low_date=low_date,
        current=current_rate,
        percentile=percentile,
    )

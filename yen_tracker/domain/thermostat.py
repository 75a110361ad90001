"""Thermostat engine - monthly conversion budget capped by total FX exposure"""

from typing import List, Optional

from yen_tracker.domain.currency import format_gbp, round_half_up
from yen_tracker.domain.models import Band, ConversionRecord, Direction, StrategySettings, ThermostatResult
from yen_tracker.domain.portfolio import calculate_net_position
from yen_tracker.utils.date_utils import current_month, month_bounds


def monthly_cap_for_band(band: Band, settings: StrategySettings) -> int:
    """Buy bands get their configured cap; HOLD and REVERSE get nothing"""
    if band == Band.AGGRESSIVE_BUY:
        return settings.cap_aggressive_gbp
    if band == Band.NORMAL_BUY:
        return settings.cap_normal_gbp
    return 0


def converted_in_month(records: List[ConversionRecord], month: str) -> int:
    """Pence converted GBP_TO_JPY within the given YYYY-MM month"""
    start, end = month_bounds(month)
    return sum(
        r.gbp_amount
        for r in records
        if r.direction == Direction.GBP_TO_JPY and start <= r.date < end
    )


def calculate_thermostat(
    band: Band,
    settings: StrategySettings,
    records: List[ConversionRecord],
    month: Optional[str] = None,
) -> ThermostatResult:
    """
    Work out how much GBP may still be converted this month.

    Two constraints apply and the tighter one wins:
    - Monthly budget: the band's cap minus what was converted this month
    - Exposure: max_fx_exposure_pct of total savings minus net GBP deployed
      across ALL conversions (not just this month)

    Reaching the exposure limit exactly counts as over-exposed.

    Args:
        band: Current band from the classifier
        settings: Strategy settings snapshot
        records: All conversion records
        month: YYYY-MM to budget for (default: current month)

    Raises:
        InvalidMonthError: If month is malformed
    """
    month = month or current_month()

    converted = converted_in_month(records, month)
    monthly_cap = monthly_cap_for_band(band, settings)
    remaining_budget = max(0, monthly_cap - converted)

    net_deployed = calculate_net_position(records).net_gbp_deployed
    savings = settings.total_gbp_savings_pence
    max_exposure = round_half_up(savings * settings.max_fx_exposure_pct / 100)
    exposure_pct = (net_deployed / savings) * 100 if savings > 0 else 0.0
    over_exposed = net_deployed >= max_exposure

    exposure_remaining = max(0, max_exposure - net_deployed)
    suggested_amount = min(remaining_budget, exposure_remaining)
    at_cap = remaining_budget == 0

    if band == Band.HOLD:
        suggestion = "Hold zone: no conversions recommended this month."
    elif band == Band.REVERSE:
        suggestion = "Reverse zone: consider converting JPY back to GBP if needed."
    elif over_exposed:
        suggestion = (
            f"FX exposure at {exposure_pct:.1f}%, at or over your "
            f"{settings.max_fx_exposure_pct}% limit. Hold further conversions."
        )
    elif at_cap:
        suggestion = (
            f"Monthly cap reached. You've converted {format_gbp(converted)} "
            f"of {format_gbp(monthly_cap)} this month."
        )
    elif suggested_amount > 0:
        suggestion = (
            f"Convert up to {format_gbp(suggested_amount)} more this month "
            f"({format_gbp(converted)} of {format_gbp(monthly_cap)} used)."
        )
    else:
        suggestion = "No budget remaining for conversions this month."

    return ThermostatResult(
        band=band,
        monthly_cap=monthly_cap,
        converted_this_month=converted,
        remaining_budget=remaining_budget,
        suggested_amount=suggested_amount,
        suggestion=suggestion,
        at_cap=at_cap,
        exposure_pct=exposure_pct,
        over_exposed=over_exposed,
        exposure_remaining=exposure_remaining,
    )

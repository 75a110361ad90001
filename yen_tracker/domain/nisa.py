"""NISA compound growth projection"""

from yen_tracker.domain.currency import round_half_up
from yen_tracker.domain.models import NisaProjection, NisaYear


def calculate_nisa_projection(monthly_jpy: int, annual_return_pct: float, years: int) -> NisaProjection:
    """
    Project monthly NISA contributions with monthly compounding.

    Each month the existing balance grows first, then the contribution is
    added, so a contribution earns nothing in the month it is paid in.

    Args:
        monthly_jpy: Monthly contribution in JPY
        annual_return_pct: Expected annual return (5 for 5%)
        years: Projection period

    Returns:
        One snapshot per year plus totals; growth_pct is 0 if nothing was contributed
    """
    monthly_rate = annual_return_pct / 100 / 12

    value = 0.0
    contributed = 0
    snapshots = []

    for year in range(1, years + 1):
        for _ in range(12):
            value = value * (1 + monthly_rate) + monthly_jpy
            contributed += monthly_jpy

        snapshots.append(
            NisaYear(
                year=year,
                contributed=contributed,
                growth=round_half_up(value - contributed),
                value=round_half_up(value),
            )
        )

    total_growth = round_half_up(value - contributed)
    growth_pct = (total_growth / contributed) * 100 if contributed > 0 else 0.0

    return NisaProjection(
        years=snapshots,
        total_contributed=contributed,
        total_value=round_half_up(value),
        total_growth=total_growth,
        growth_pct=growth_pct,
    )

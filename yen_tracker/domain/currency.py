"""GBP/JPY unit conversion and formatting primitives.

GBP amounts are integer pence, JPY amounts integer yen, rates are JPY per GBP.
"""

import math


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves towards positive infinity"""
    return math.floor(value + 0.5)


def pence_to_pounds(pence: float) -> float:
    return round_half_up(pence) / 100


def pounds_to_pence(pounds: float) -> int:
    return round_half_up(pounds * 100)


def convert_gbp_to_jpy(gbp_pence: int, rate: float) -> int:
    return round_half_up((gbp_pence / 100) * rate)


def convert_jpy_to_gbp(jpy: int, rate: float) -> int:
    """
    Convert yen to pence at the given rate.

    A zero rate is not special-cased here; callers guard it.
    """
    return round_half_up((jpy / rate) * 100)


def calculate_effective_rate(jpy: int, gbp_pence: int) -> float:
    """Rate actually achieved on a conversion (JPY per GBP), 0 if no GBP"""
    if gbp_pence <= 0:
        return 0.0
    return jpy / (gbp_pence / 100)


def calculate_fee(amount: int, fee_pct: float) -> int:
    return round_half_up((amount * fee_pct) / 100)


def format_gbp(pence: float) -> str:
    """120050 -> '£1,200.50'"""
    return f"£{pence_to_pounds(pence):,.2f}"


def format_jpy(jpy: float) -> str:
    """1900000 -> '¥1,900,000'"""
    return f"¥{round_half_up(jpy):,}"


def format_rate(rate: float) -> str:
    return f"{rate:.2f}"

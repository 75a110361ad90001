"""Alert rules - decide which state transitions deserve a new alert"""

from datetime import date
from typing import List, Optional

from yen_tracker.domain.bands import band_label
from yen_tracker.domain.models import (
    Alert,
    AlertDraft,
    AlertType,
    Band,
    CircuitBreakerResult,
    StrategySettings,
)

RECALIBRATE_MESSAGE = "Band thresholds may need review. Consider recalibrating your strategy."


def band_change_alerts(
    current_band: Band,
    current_rate: float,
    last_band_alert: Optional[Alert],
) -> List[AlertDraft]:
    """
    Alert on a band transition.

    Nothing is raised while the band matches the most recent band_change
    alert. Entering the REVERSE band also raises a reverse_zone alert.
    """
    if last_band_alert is not None and last_band_alert.band == current_band.value:
        return []

    drafts = [
        AlertDraft(
            type=AlertType.BAND_CHANGE,
            message=f"Band changed to {band_label(current_band)} at rate {current_rate:.2f}",
            rate=current_rate,
            band=current_band.value,
        )
    ]
    if current_band == Band.REVERSE:
        drafts.append(
            AlertDraft(
                type=AlertType.REVERSE_ZONE,
                message=f"Rate {current_rate:.2f} is in the reverse zone. Consider converting JPY back to GBP if needed.",
                rate=current_rate,
                band=current_band.value,
            )
        )
    return drafts


def circuit_breaker_alert(
    result: CircuitBreakerResult,
    current_rate: float,
    last_breaker_alert: Optional[Alert],
) -> Optional[AlertDraft]:
    """One breaker alert at a time: re-alert only once the previous one is acknowledged"""
    if not result.triggered:
        return None
    if last_breaker_alert is not None and not last_breaker_alert.acknowledged:
        return None
    return AlertDraft(type=AlertType.CIRCUIT_BREAKER, message=result.message, rate=current_rate)


def recalibration_due(last_review: Optional[date], interval_days: int, today: date | None = None) -> bool:
    if last_review is None:
        return True
    today = today or date.today()
    return (today - last_review).days >= interval_days


def recalibration_alert(
    settings: StrategySettings,
    last_recalibrate_alert: Optional[Alert],
    today: date | None = None,
) -> Optional[AlertDraft]:
    if not recalibration_due(settings.last_band_review, settings.review_interval_days, today):
        return None
    if last_recalibrate_alert is not None and not last_recalibrate_alert.acknowledged:
        return None
    return AlertDraft(type=AlertType.RECALIBRATE, message=RECALIBRATE_MESSAGE)

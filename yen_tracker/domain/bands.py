"""Band classifier - maps the live rate onto a policy band"""

from typing import Optional, Union

from yen_tracker.domain.models import Band, BandResult, BandThresholds, StrategySettings

BAND_SUGGESTIONS = {
    Band.AGGRESSIVE_BUY: "Rate is excellent. Convert up to your aggressive monthly cap.",
    Band.NORMAL_BUY: "Rate is favourable. Convert up to your normal monthly cap.",
    Band.HOLD: "Rate is below your buy threshold. Hold and wait for improvement.",
    Band.REVERSE: "Rate is very low. Consider converting JPY back to GBP if needed.",
}

BAND_LABELS = {
    Band.AGGRESSIVE_BUY: "Aggressive Buy",
    Band.NORMAL_BUY: "Normal Buy",
    Band.HOLD: "Hold",
    Band.REVERSE: "Reverse Zone",
}


def thresholds_from_settings(settings: StrategySettings) -> BandThresholds:
    return BandThresholds(
        aggressive_above=settings.aggressive_above,
        normal_above=settings.normal_above,
        hold_above=settings.hold_above,
    )


def determine_band(rate: float, thresholds: BandThresholds) -> BandResult:
    """
    Classify a rate into one of four bands.

    Comparisons are inclusive and evaluated from the most aggressive band
    down, so a rate sitting exactly on a threshold gets the more aggressive
    of the two neighbouring bands:

    - rate >= aggressive_above: AGGRESSIVE_BUY
    - rate >= normal_above:     NORMAL_BUY
    - rate >= hold_above:       HOLD
    - otherwise:                REVERSE

    Threshold ordering is validated when settings are written, not here.
    """
    if rate >= thresholds.aggressive_above:
        band = Band.AGGRESSIVE_BUY
    elif rate >= thresholds.normal_above:
        band = Band.NORMAL_BUY
    elif rate >= thresholds.hold_above:
        band = Band.HOLD
    else:
        band = Band.REVERSE

    return BandResult(
        band=band,
        rate=rate,
        thresholds=thresholds,
        suggestion=BAND_SUGGESTIONS[band],
    )


def band_label(band: Optional[Union[Band, str]]) -> str:
    """Human-readable band name, '--' when no band is recorded"""
    if band is None:
        return "--"
    try:
        return BAND_LABELS[Band(band)]
    except ValueError:
        return str(band)

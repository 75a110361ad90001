"""GET /v1/rates - live rate, band, circuit breaker and alerts"""

import logging
from datetime import date
from typing import List, Tuple

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from yen_tracker.api.dependencies import get_rate_client, get_request_id
from yen_tracker.api.v1.schemas import (
    AlertSchema,
    BackfillResponse,
    BandSchema,
    CircuitBreakerSchema,
    RateHistoryPointSchema,
    RateInfoSchema,
    RatesResponse,
)
from yen_tracker.config import settings
from yen_tracker.domain.alerts import band_change_alerts, circuit_breaker_alert, recalibration_alert
from yen_tracker.domain.bands import determine_band, thresholds_from_settings
from yen_tracker.domain.circuit_breaker import check_circuit_breaker
from yen_tracker.domain.exceptions import RateSourceError, RateUnavailableError
from yen_tracker.domain.models import AlertDraft, AlertType, BandResult, CircuitBreakerResult, RateInfo, StrategySettings
from yen_tracker.infrastructure.clients.frankfurter import RateClient
from yen_tracker.infrastructure.database.repositories import (
    AlertRepository,
    ConversionRepository,
    RateHistoryRepository,
    SettingsRepository,
)
from yen_tracker.infrastructure.database.session import get_db
from yen_tracker.infrastructure.observability.logging import log_alert_created, log_rate_resolved
from yen_tracker.infrastructure.observability.metrics import (
    alert_counter,
    rate_fallback_counter,
    rate_fetch_failures_counter,
    record_band,
    record_circuit_breaker,
)
from yen_tracker.utils.date_utils import days_ago

router = APIRouter()


async def resolve_current_rate(db: Session, rate_client: RateClient, request_id: str) -> Tuple[RateInfo, bool]:
    """
    Fetch the live rate and cache it, falling back to the latest cached rate.

    Returns:
        (rate_info, fallback) where fallback is True when the cache was used

    Raises:
        RateUnavailableError: If the fetch failed and nothing is cached
    """
    history_repo = RateHistoryRepository(db)
    fallback = False

    try:
        rate_info = await rate_client.fetch_current_rate()
        history_repo.cache_rate(rate_info)
    except RateSourceError as e:
        rate_fetch_failures_counter.inc()
        logging.warning(f"Rate fetch failed, using cache: {e}", extra={"request_id": request_id})
        rate_info = history_repo.get_latest()
        fallback = True
        if rate_info is None:
            raise RateUnavailableError("No rate data available") from e
        rate_fallback_counter.inc()

    log_rate_resolved(request_id, rate_info, fallback)
    return rate_info, fallback


def _raise_alerts(
    alert_repo: AlertRepository,
    band: BandResult,
    breaker: CircuitBreakerResult,
    strategy: StrategySettings,
    request_id: str,
) -> List[AlertDraft]:
    drafts = band_change_alerts(band.band, band.rate, alert_repo.get_latest_of_type(AlertType.BAND_CHANGE))

    breaker_draft = circuit_breaker_alert(breaker, band.rate, alert_repo.get_latest_of_type(AlertType.CIRCUIT_BREAKER))
    if breaker_draft:
        drafts.append(breaker_draft)

    recalibrate_draft = recalibration_alert(strategy, alert_repo.get_latest_of_type(AlertType.RECALIBRATE))
    if recalibrate_draft:
        drafts.append(recalibrate_draft)

    for draft in drafts:
        alert_repo.create(draft)
        alert_counter.labels(type=draft.type.value).inc()
        log_alert_created(request_id, draft)

    return drafts


@router.get("/rates", response_model=RatesResponse)
async def get_rates(
    request: Request,
    db: Session = Depends(get_db),
    rate_client: RateClient = Depends(get_rate_client),
):
    """
    Current rate with its band and circuit breaker verdict.

    Flow:
    1. Resolve the live rate (cache fallback on fetch failure)
    2. Classify the band and check the circuit breaker
    3. Persist any new alerts (band change, reverse zone, breaker, recalibration)
    4. Return the unacknowledged alerts alongside
    """
    request_id = get_request_id(request)

    try:
        rate_info, fallback = await resolve_current_rate(db, rate_client, request_id)

        strategy = SettingsRepository(db).get()
        band = determine_band(rate_info.rate, thresholds_from_settings(strategy))
        records = ConversionRepository(db).list_records()
        breaker = check_circuit_breaker(records, rate_info.rate, strategy)

        alert_repo = AlertRepository(db)
        _raise_alerts(alert_repo, band, breaker, strategy, request_id)
        unacknowledged = alert_repo.get_unacknowledged()

        db.commit()

        record_band(band.band.value)
        record_circuit_breaker(breaker.triggered)

        return RatesResponse(
            rate=RateInfoSchema.model_validate(rate_info),
            band=BandSchema.model_validate(band),
            fallback=fallback,
            circuit_breaker=CircuitBreakerSchema.model_validate(breaker),
            alerts=[AlertSchema.model_validate(a) for a in unacknowledged],
        )

    except RateUnavailableError as e:
        db.rollback()
        logging.error(f"Rate unavailable: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail=str(e))

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/rates/history", response_model=List[RateHistoryPointSchema])
def get_rate_history(
    days: int = Query(settings.rate_history_days, ge=1, le=3650, description="Lookback window in days"),
    db: Session = Depends(get_db),
):
    """Cached daily rates for the last N days, oldest first"""
    points = RateHistoryRepository(db).get_history(since=days_ago(days))
    return [RateHistoryPointSchema.model_validate(p) for p in points]


@router.post("/rates/backfill", response_model=BackfillResponse)
async def backfill_rate_history(
    request: Request,
    days: int = Query(settings.rate_history_days, ge=1, le=3650),
    db: Session = Depends(get_db),
    rate_client: RateClient = Depends(get_rate_client),
):
    """Fetch the last N days of published rates into the history cache"""
    request_id = get_request_id(request)
    end = date.today()
    start = days_ago(days, end)

    try:
        rates = await rate_client.fetch_historical_rates(start, end)
        cached = RateHistoryRepository(db).cache_rates(rates)
        db.commit()
    except RateSourceError as e:
        rate_fetch_failures_counter.inc()
        db.rollback()
        logging.error(f"Rate history fetch failed: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail="Rate service unavailable")

    return BackfillResponse(start=start, end=end, cached=cached)

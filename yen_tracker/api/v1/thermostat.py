"""GET /v1/thermostat - this month's conversion budget"""

import time
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from yen_tracker.api.dependencies import get_rate_client, get_request_id
from yen_tracker.api.v1.rates import resolve_current_rate
from yen_tracker.api.v1.schemas import BandSchema, RateInfoSchema, ThermostatResponse, ThermostatSchema
from yen_tracker.domain.bands import determine_band, thresholds_from_settings
from yen_tracker.domain.exceptions import InvalidMonthError, RateUnavailableError
from yen_tracker.domain.thermostat import calculate_thermostat
from yen_tracker.infrastructure.clients.frankfurter import RateClient
from yen_tracker.infrastructure.database.repositories import ConversionRepository, SettingsRepository
from yen_tracker.infrastructure.database.session import get_db
from yen_tracker.infrastructure.observability.logging import log_thermostat
from yen_tracker.infrastructure.observability.metrics import record_band
from yen_tracker.utils.date_utils import month_bounds

router = APIRouter()


@router.get("/thermostat", response_model=ThermostatResponse)
async def get_thermostat(
    request: Request,
    month: Optional[str] = Query(None, description="Month to budget for, YYYY-MM (default: current month)"),
    db: Session = Depends(get_db),
    rate_client: RateClient = Depends(get_rate_client),
):
    """
    Remaining monthly budget for the current band, capped by FX exposure.
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        if month:
            month_bounds(month)

        rate_info, fallback = await resolve_current_rate(db, rate_client, request_id)

        strategy = SettingsRepository(db).get()
        band = determine_band(rate_info.rate, thresholds_from_settings(strategy))
        records = ConversionRepository(db).list_records()
        result = calculate_thermostat(band.band, strategy, records, month)

        db.commit()

        duration_ms = (time.time() - start_time) * 1000
        record_band(band.band.value)
        log_thermostat(request_id, result, duration_ms)

        return ThermostatResponse(
            thermostat=ThermostatSchema.model_validate(result),
            rate=RateInfoSchema.model_validate(rate_info),
            band=BandSchema.model_validate(band),
            fallback=fallback,
        )

    except InvalidMonthError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))

    except RateUnavailableError as e:
        db.rollback()
        logging.error(f"Rate unavailable: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail=str(e))

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

"""/v1/conversions - log, list and delete currency conversions"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from yen_tracker.api.v1.schemas import ConversionCreate, ConversionResponse
from yen_tracker.domain.exceptions import ConversionNotFoundError
from yen_tracker.infrastructure.database.repositories import ConversionRepository
from yen_tracker.infrastructure.database.session import get_db
from yen_tracker.infrastructure.observability.metrics import conversion_counter

router = APIRouter()


@router.get("/conversions", response_model=List[ConversionResponse])
def list_conversions(db: Session = Depends(get_db)):
    """All conversions, newest first"""
    return [ConversionResponse.model_validate(r) for r in ConversionRepository(db).list_records()]


@router.post("/conversions", response_model=ConversionResponse, status_code=201)
def create_conversion(body: ConversionCreate, db: Session = Depends(get_db)):
    """
    Log a conversion.

    The rate is stored as given and not checked against the amounts, so a
    fee-inclusive rate can be recorded.
    """
    record = ConversionRepository(db).create(
        conversion_date=body.date,
        direction=body.direction,
        gbp_amount=body.gbp_pence,
        jpy_amount=body.jpy_amount,
        exchange_rate=body.rate,
        spot_rate=body.spot_rate,
        fee_pct=body.fee_pct,
        provider=body.provider.value if body.provider else None,
        band_at_time=body.band_at_time,
        notes=body.notes,
    )
    db.commit()
    conversion_counter.labels(direction=record.direction.value).inc()
    return ConversionResponse.model_validate(record)


@router.delete("/conversions/{conversion_id}")
def delete_conversion(conversion_id: int, db: Session = Depends(get_db)):
    """Conversions are never edited in place; a mistake is deleted and re-logged"""
    try:
        ConversionRepository(db).delete(conversion_id)
    except ConversionNotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))

    db.commit()
    return {"success": True}

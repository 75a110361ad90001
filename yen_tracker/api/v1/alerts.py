"""/v1/alerts - list and acknowledge alerts"""

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from yen_tracker.api.v1.schemas import AcknowledgeRequest, AcknowledgeResponse, AlertSchema, AlertsResponse
from yen_tracker.config import settings
from yen_tracker.infrastructure.database.repositories import AlertRepository
from yen_tracker.infrastructure.database.session import get_db

router = APIRouter()


@router.get("/alerts", response_model=AlertsResponse)
def list_alerts(
    include_acknowledged: bool = Query(False, alias="all", description="Include acknowledged alerts (most recent only)"),
    db: Session = Depends(get_db),
):
    repo = AlertRepository(db)
    alerts = repo.get_recent(settings.alert_history_limit) if include_acknowledged else repo.get_unacknowledged()
    return AlertsResponse(alerts=[AlertSchema.model_validate(a) for a in alerts])


@router.post("/alerts/acknowledge", response_model=AcknowledgeResponse)
def acknowledge_alerts(body: AcknowledgeRequest, db: Session = Depends(get_db)):
    """Acknowledge one alert ({"id": n}) or every open alert ({"all": true})"""
    repo = AlertRepository(db)

    if body.all:
        repo.acknowledge_all()
        db.commit()
        return AcknowledgeResponse(success=True, message="All alerts acknowledged")

    if body.id is not None:
        repo.acknowledge(body.id)
        db.commit()
        return AcknowledgeResponse(success=True, message=f"Alert {body.id} acknowledged")

    raise HTTPException(status_code=400, detail="Provide {id: number} or {all: true}")

"""/v1/settings - read and replace the strategy settings"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from yen_tracker.api.v1.schemas import SettingsResponse, SettingsUpdate
from yen_tracker.infrastructure.database.repositories import SettingsRepository
from yen_tracker.infrastructure.database.session import get_db

router = APIRouter()


@router.get("/settings", response_model=SettingsResponse)
def get_settings(db: Session = Depends(get_db)):
    """Current settings; defaults are stored on first access"""
    row = SettingsRepository(db).get_row()
    db.commit()
    return SettingsResponse.model_validate(row)


@router.put("/settings", response_model=SettingsResponse)
def replace_settings(body: SettingsUpdate, db: Session = Depends(get_db)):
    """
    Replace every setting at once.

    Threshold ordering (hold < normal <= aggressive) and value ranges are
    enforced by SettingsUpdate before anything is written.
    """
    row = SettingsRepository(db).replace(body.to_domain())
    db.commit()
    db.refresh(row)
    return SettingsResponse.model_validate(row)

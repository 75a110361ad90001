"""Data access layer - translates between ORM rows and domain snapshots"""

from dataclasses import asdict, fields
from datetime import date, datetime, timezone
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from yen_tracker.domain.exceptions import ConversionNotFoundError
from yen_tracker.domain.models import (
    Alert,
    AlertDraft,
    AlertType,
    Band,
    ConversionRecord,
    Direction,
    RateHistoryPoint,
    RateInfo,
    StrategySettings,
)
from yen_tracker.infrastructure.database.models import AlertRow, Conversion, RateHistory, StrategySettingsRow

SETTINGS_ID = 1
_SETTINGS_FIELDS = [f.name for f in fields(StrategySettings)]


def _to_conversion_record(row: Conversion) -> ConversionRecord:
    return ConversionRecord(
        id=row.id,
        date=row.date,
        direction=Direction(row.direction),
        gbp_amount=row.gbp_amount,
        jpy_amount=row.jpy_amount,
        exchange_rate=row.exchange_rate,
        spot_rate=row.spot_rate,
        fee_pct=row.fee_pct,
        provider=row.provider,
        band_at_time=Band(row.band_at_time) if row.band_at_time else None,
        notes=row.notes,
        created_at=row.created_at,
    )


def _to_alert(row: AlertRow) -> Alert:
    return Alert(
        id=row.id,
        type=AlertType(row.type),
        message=row.message,
        rate=row.rate,
        band=row.band,
        acknowledged=bool(row.acknowledged),
        created_at=row.created_at,
    )


class ConversionRepository:
    """Repository for conversion records"""

    def __init__(self, db: Session):
        self.db = db

    def list_rows(self, start: date | None = None, end: date | None = None) -> List[Conversion]:
        """Rows newest first, optionally limited to an inclusive date range"""
        query = self.db.query(Conversion)
        if start is not None:
            query = query.filter(Conversion.date >= start)
        if end is not None:
            query = query.filter(Conversion.date <= end)
        return query.order_by(Conversion.date.desc(), Conversion.created_at.desc(), Conversion.id.desc()).all()

    def list_records(self, start: date | None = None, end: date | None = None) -> List[ConversionRecord]:
        return [_to_conversion_record(row) for row in self.list_rows(start, end)]

    def create(
        self,
        conversion_date: date,
        direction: Direction,
        gbp_amount: int,
        jpy_amount: int,
        exchange_rate: float,
        spot_rate: Optional[float] = None,
        fee_pct: Optional[float] = None,
        provider: Optional[str] = None,
        band_at_time: Optional[Band] = None,
        notes: Optional[str] = None,
    ) -> ConversionRecord:
        """Persist a conversion; fee defaults to 0 and provider to WISE"""
        row = Conversion(
            date=conversion_date,
            direction=direction.value,
            gbp_amount=gbp_amount,
            jpy_amount=jpy_amount,
            exchange_rate=exchange_rate,
            spot_rate=spot_rate,
            fee_pct=fee_pct if fee_pct is not None else 0,
            provider=provider or "WISE",
            band_at_time=band_at_time.value if band_at_time else None,
            notes=notes,
        )
        self.db.add(row)
        self.db.flush()
        self.db.refresh(row)
        return _to_conversion_record(row)

    def delete(self, conversion_id: int) -> None:
        """
        Raises:
            ConversionNotFoundError: If no conversion has this id
        """
        row = self.db.get(Conversion, conversion_id)
        if row is None:
            raise ConversionNotFoundError(f"Conversion {conversion_id} not found")
        self.db.delete(row)
        self.db.flush()


class SettingsRepository:
    """Repository for the singleton strategy settings row"""

    def __init__(self, db: Session):
        self.db = db

    def get_row(self) -> StrategySettingsRow:
        """Fetch the settings row, inserting defaults on first access"""
        row = self.db.get(StrategySettingsRow, SETTINGS_ID)
        if row is None:
            row = StrategySettingsRow(id=SETTINGS_ID, **asdict(StrategySettings()))
            self.db.add(row)
            self.db.flush()
            self.db.refresh(row)
        return row

    def get(self) -> StrategySettings:
        row = self.get_row()
        return StrategySettings(**{name: getattr(row, name) for name in _SETTINGS_FIELDS})

    def replace(self, new_settings: StrategySettings) -> StrategySettingsRow:
        """Overwrite every setting at once"""
        row = self.get_row()
        for name, value in asdict(new_settings).items():
            setattr(row, name, value)
        row.updated_at = datetime.now(timezone.utc)
        self.db.flush()
        return row


class RateHistoryRepository:
    """Repository for cached daily rates"""

    def __init__(self, db: Session):
        self.db = db

    def cache_rate(self, rate_info: RateInfo) -> None:
        """Store a rate; a second fetch on the same day overwrites the first"""
        self.db.merge(
            RateHistory(
                date=rate_info.date,
                rate=rate_info.rate,
                source=rate_info.source,
                fetched_at=rate_info.fetched_at,
            )
        )
        self.db.flush()

    def cache_rates(self, rates: Dict[date, float], source: str = "frankfurter") -> int:
        fetched_at = datetime.now(timezone.utc)
        for day, rate in rates.items():
            self.db.merge(RateHistory(date=day, rate=rate, source=source, fetched_at=fetched_at))
        self.db.flush()
        return len(rates)

    def get_latest(self) -> Optional[RateInfo]:
        row = self.db.query(RateHistory).order_by(RateHistory.date.desc()).first()
        if row is None:
            return None
        return RateInfo(
            rate=row.rate,
            date=row.date,
            source=row.source,
            is_stale=False,
            fetched_at=row.fetched_at,
        )

    def get_history(self, since: date) -> List[RateHistoryPoint]:
        """Points on or after `since`, oldest first"""
        rows = (
            self.db.query(RateHistory)
            .filter(RateHistory.date >= since)
            .order_by(RateHistory.date.asc())
            .all()
        )
        return [RateHistoryPoint(date=row.date, rate=row.rate) for row in rows]

    def list_rows(self) -> List[RateHistory]:
        return self.db.query(RateHistory).order_by(RateHistory.date.asc()).all()


class AlertRepository:
    """Repository for alerts"""

    def __init__(self, db: Session):
        self.db = db

    def create(self, draft: AlertDraft) -> Alert:
        row = AlertRow(
            type=draft.type.value,
            message=draft.message,
            rate=draft.rate,
            band=draft.band,
            acknowledged=False,
        )
        self.db.add(row)
        self.db.flush()
        self.db.refresh(row)
        return _to_alert(row)

    def _newest_first(self):
        return self.db.query(AlertRow).order_by(AlertRow.created_at.desc(), AlertRow.id.desc())

    def get_unacknowledged(self) -> List[Alert]:
        rows = self._newest_first().filter(AlertRow.acknowledged.is_(False)).all()
        return [_to_alert(row) for row in rows]

    def get_recent(self, limit: int = 20) -> List[Alert]:
        return [_to_alert(row) for row in self._newest_first().limit(limit).all()]

    def get_latest_of_type(self, alert_type: AlertType) -> Optional[Alert]:
        row = self._newest_first().filter(AlertRow.type == alert_type.value).first()
        return _to_alert(row) if row else None

    def acknowledge(self, alert_id: int) -> None:
        self.db.query(AlertRow).filter(AlertRow.id == alert_id).update({AlertRow.acknowledged: True})

    def acknowledge_all(self) -> None:
        self.db.query(AlertRow).filter(AlertRow.acknowledged.is_(False)).update({AlertRow.acknowledged: True})

    def list_rows(self) -> List[AlertRow]:
        return self.db.query(AlertRow).order_by(AlertRow.id.asc()).all()

"""GET /v1/export/csv and /v1/export/backup - data export"""

import csv
import io
import json
import re
from datetime import date, datetime, timezone
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from sqlalchemy import inspect
from sqlalchemy.orm import Session

from yen_tracker.api.v1.schemas import TaxSystem
from yen_tracker.domain.currency import pence_to_pounds
from yen_tracker.infrastructure.database.repositories import (
    AlertRepository,
    ConversionRepository,
    RateHistoryRepository,
    SettingsRepository,
)
from yen_tracker.infrastructure.database.session import get_db
from yen_tracker.utils.date_utils import parse_tax_year_range

router = APIRouter()

BACKUP_VERSION = "1.0.0"
CSV_COLUMNS = [
    "Date",
    "Direction",
    "GBP Amount",
    "JPY Amount",
    "Exchange Rate",
    "Spot Rate",
    "Fee %",
    "Provider",
    "Band",
    "Notes",
]


def _blank_if_none(value: Any) -> str:
    return "" if value is None else str(value)


def _row_to_dict(row: Any) -> Dict[str, Any]:
    """Column values of an ORM row, dates as ISO strings"""
    result = {}
    for column in inspect(row).mapper.column_attrs:
        value = getattr(row, column.key)
        result[column.key] = value.isoformat() if isinstance(value, (date, datetime)) else value
    return result


@router.get("/export/csv")
def export_csv(
    tax_year: Optional[str] = Query(None, description="'2025-2026' (uk) or '2025' (jp)"),
    tax_system: TaxSystem = Query("uk"),
    db: Session = Depends(get_db),
):
    """
    Conversions as CSV, newest first, optionally limited to one tax year.

    An unparseable tax year exports everything.
    """
    start = end = None
    if tax_year:
        tax_range = parse_tax_year_range(tax_year, tax_system)
        if tax_range:
            start, end = tax_range

    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(CSV_COLUMNS)
    for record in ConversionRepository(db).list_records(start, end):
        writer.writerow(
            [
                record.date.isoformat(),
                record.direction.value,
                f"{pence_to_pounds(record.gbp_amount):.2f}",
                record.jpy_amount,
                record.exchange_rate,
                _blank_if_none(record.spot_rate),
                _blank_if_none(record.fee_pct),
                _blank_if_none(record.provider),
                record.band_at_time.value if record.band_at_time else "",
                _blank_if_none(record.notes),
            ]
        )

    safe_year = re.sub(r"[^a-zA-Z0-9\-]", "", tax_year or "")
    filename = f"yen-tracker-{tax_system}-{safe_year}.csv" if safe_year else "yen-tracker-export.csv"

    return Response(
        content=buffer.getvalue(),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/export/backup")
def export_backup(db: Session = Depends(get_db)):
    """Full JSON dump of every table"""
    SettingsRepository(db).get_row()
    db.commit()

    tables = {
        "conversions": [_row_to_dict(r) for r in ConversionRepository(db).list_rows()],
        "settings": [_row_to_dict(SettingsRepository(db).get_row())],
        "rate_history": [_row_to_dict(r) for r in RateHistoryRepository(db).list_rows()],
        "alerts": [_row_to_dict(r) for r in AlertRepository(db).list_rows()],
    }
    backup = {
        "metadata": {
            "export_date": datetime.now(timezone.utc).isoformat(),
            "version": BACKUP_VERSION,
            "tables": {name: len(rows) for name, rows in tables.items()},
        },
        **tables,
    }

    today = date.today().isoformat()
    return Response(
        content=json.dumps(backup, indent=2),
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="yen-tracker-backup-{today}.json"'},
    )

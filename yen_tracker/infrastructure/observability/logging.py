"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger.json import JsonFormatter

from yen_tracker.config import settings
from yen_tracker.domain.models import AlertDraft, RateInfo, ThermostatResult


class CustomJsonFormatter(JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    # JSON handler for stdout
    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_rate_resolved(request_id: str, rate_info: RateInfo, fallback: bool) -> None:
    """Log which rate the request will be evaluated against"""
    logging.info(
        "Rate resolved",
        extra={
            "request_id": request_id,
            "step": "rate_resolved",
            "rate": rate_info.rate,
            "rate_date": rate_info.date.isoformat(),
            "source": rate_info.source,
            "is_stale": rate_info.is_stale,
            "fallback": fallback,
        },
    )


def log_thermostat(request_id: str, result: ThermostatResult, duration_ms: float) -> None:
    """Log thermostat outcome for later analysis"""
    logging.info(
        "Thermostat evaluated",
        extra={
            "request_id": request_id,
            "step": "thermostat_complete",
            "band": result.band.value,
            "monthly_cap_pence": result.monthly_cap,
            "converted_this_month_pence": result.converted_this_month,
            "suggested_amount_pence": result.suggested_amount,
            "over_exposed": result.over_exposed,
            "duration_ms": duration_ms,
        },
    )


def log_alert_created(request_id: str, draft: AlertDraft) -> None:
    logging.info(
        "Alert created",
        extra={
            "request_id": request_id,
            "step": "alert_created",
            "alert_type": draft.type.value,
            "band": draft.band,
            "rate": draft.rate,
        },
    )

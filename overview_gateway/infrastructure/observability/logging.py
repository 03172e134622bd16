"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from pythonjsonlogger import jsonlogger

from overview_gateway.config import settings


class CustomJsonFormatter(jsonlogger.JsonFormatter):
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


def log_metrics_computed(
    request_id: str,
    tenant_id: str,
    step: str,
    duration_ms: float,
    entity_id: Optional[str] = None,
    **fields: Any,
) -> None:
    """Log structured outcome of an overview computation"""
    logging.info(
        "Overview computed",
        extra={
            "request_id": request_id,
            "tenant_id": tenant_id,
            "entity_id": entity_id,
            "step": step,
            "duration_ms": duration_ms,
            **fields,
        },
    )


def log_rate_fallback(pair: str, tenant_id: str, request_id: str = "unknown") -> None:
    """Missing FX rates degrade to 1:1; log them as a data-quality signal"""
    logging.warning(
        "FX rate missing, converting 1:1",
        extra={
            "request_id": request_id,
            "tenant_id": tenant_id,
            "step": "fx_normalize",
            "pair": pair,
        },
    )

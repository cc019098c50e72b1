"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger

from txn_risk_engine.config import settings


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


def log_analysis(
    request_id: str,
    filename: str,
    total_transactions: int,
    suspicious_transactions: int,
    overall_risk_score: int,
    eligible: bool,
    duration_ms: float,
) -> None:
    """Log structured analysis outcome"""
    logging.info(
        "Analysis completed",
        extra={
            "request_id": request_id,
            "upload_filename": filename,
            "step": "analysis_complete",
            "total_transactions": total_transactions,
            "suspicious_transactions": suspicious_transactions,
            "overall_risk_score": overall_risk_score,
            "eligibility_outcome": "eligible" if eligible else "ineligible",
            "duration_ms": duration_ms,
        },
    )

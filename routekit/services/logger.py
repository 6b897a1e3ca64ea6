"""Structured JSON logging."""

import logging
import sys
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pythonjsonlogger import jsonlogger


# Correlates every log entry emitted by one process invocation
REQUEST_ID = str(uuid.uuid4())


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter that adds request_id and standardized fields."""

    def add_fields(
        self,
        log_record: Dict[str, Any],
        record: logging.LogRecord,
        message_dict: Dict[str, Any],
    ) -> None:
        """Add custom fields to log record.

        Args:
            log_record: The log record to modify.
            record: The original logging.LogRecord.
            message_dict: Additional fields from the logging call.
        """
        super().add_fields(log_record, record, message_dict)

        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["request_id"] = REQUEST_ID
        log_record["level"] = record.levelname
        log_record["logger"] = record.name


def setup_logging(verbose: bool = False) -> logging.Logger:
    """Configure structured JSON logging for the application.

    Args:
        verbose: Log at DEBUG instead of INFO.

    Returns:
        logging.Logger: Configured root logger.
    """
    logger = logging.getLogger()
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)

    # Remove existing handlers to avoid duplicates
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    # Reports go to stdout, so logs go to stderr
    json_handler = logging.StreamHandler(sys.stderr)
    json_handler.setFormatter(CustomJsonFormatter("%(message)s"))
    logger.addHandler(json_handler)

    # urllib3 logs every connection at DEBUG
    logging.getLogger("urllib3").setLevel(logging.WARNING)

    return logger


def log_provider_query(
    provider: str,
    domain: str,
    record_type: str,
    status: str,
    record_count: int,
    elapsed_ms: int,
    error: Optional[str] = None,
) -> None:
    """Log structured result of one provider query.

    Args:
        provider: Provider name.
        domain: Domain queried.
        record_type: Record type queried.
        status: QueryStatus value.
        record_count: Number of records returned.
        elapsed_ms: Query time in milliseconds.
        error: Failure description, if any.
    """
    logger = logging.getLogger(__name__)
    logger.debug(
        "Provider query completed",
        extra={
            "provider": provider,
            "domain": domain,
            "record_type": record_type,
            "status": status,
            "record_count": record_count,
            "elapsed_ms": elapsed_ms,
            "error": error,
        },
    )


def log_propagation_check(
    domain: str,
    record_type: str,
    propagated: int,
    total: int,
    is_consistent: bool,
    failed_providers: List[str],
    duration_ms: int,
) -> None:
    """Log propagation check summary.

    Args:
        domain: Domain checked.
        record_type: Record type checked.
        propagated: Providers that returned records.
        total: Providers queried.
        is_consistent: Whether the returned record sets agree.
        failed_providers: Providers whose query failed.
        duration_ms: Wall-clock time of the whole check.
    """
    logger = logging.getLogger(__name__)
    logger.info(
        "Propagation check completed",
        extra={
            "domain": domain,
            "record_type": record_type,
            "propagated": propagated,
            "total_providers": total,
            "is_consistent": is_consistent,
            "failed_providers": failed_providers,
            "duration_ms": duration_ms,
        },
    )


def log_lookup_summary(
    domain: str,
    requested_types: List[str],
    record_count: int,
    failed_types: List[str],
    duration_ms: int,
) -> None:
    """Log multi-type lookup summary.

    Args:
        domain: Domain looked up.
        requested_types: Types requested (empty means all).
        record_count: Records found after filtering.
        failed_types: Types whose query failed on every provider.
        duration_ms: Wall-clock time of the whole lookup.
    """
    logger = logging.getLogger(__name__)
    logger.info(
        "DNS lookup completed",
        extra={
            "domain": domain,
            "requested_types": requested_types,
            "record_count": record_count,
            "failed_types": failed_types,
            "duration_ms": duration_ms,
        },
    )

"""
Centralized logging configuration for campaign result tracking.

This module provides standardized logging configuration using structlog
for all components. State transitions, identifier generation and geo
enrichment all log through loggers obtained here so that audit records
share one structured format.
"""
import logging
import sys
from datetime import datetime
from typing import Any, Optional

import structlog
from structlog.types import FilteringBoundLogger


def configure_logging(
    level: str = "INFO",
    format_json: bool = False,
    include_timestamp: bool = True,
    include_caller: bool = False,
    extra_processors: Optional[list] = None
) -> None:
    """
    Configure structlog for the entire application.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_json: If True, output JSON format; otherwise human-readable
        include_timestamp: Include timestamp in log output
        include_caller: Include caller information (filename, line number)
        extra_processors: Additional structlog processors to include
    """
    log_level = getattr(logging, level.upper())

    logging.basicConfig(
        level=log_level,
        stream=sys.stdout,
        format="%(message)s"  # structlog will handle formatting
    )

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if include_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))

    if include_caller:
        processors.append(structlog.processors.CallsiteParameterAdder(
            parameters=[structlog.processors.CallsiteParameter.FILENAME,
                       structlog.processors.CallsiteParameter.LINENO]
        ))

    if extra_processors:
        processors.extend(extra_processors)

    if format_json:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> FilteringBoundLogger:
    """
    Get a configured structlog logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger instance
    """
    return structlog.get_logger(name)


def get_state_logger(name: str) -> FilteringBoundLogger:
    """
    Get a logger specifically configured for result status transitions.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger for state transitions
    """
    logger = get_logger(name)

    return logger.bind(
        subsystem="state_machine",
        audit_trail=True
    )


def log_state_transition(
    logger: FilteringBoundLogger,
    result_id: str,
    from_state: str,
    to_state: str,
    trigger: str,
    applied: bool = True,
    context: Optional[dict[str, Any]] = None
) -> None:
    """
    Log a result status transition with standardized format.

    Args:
        logger: Structlog logger instance
        result_id: External identifier of the result
        from_state: Status before the event
        to_state: Status after the event (unchanged when suppressed)
        trigger: Event kind that drove the transition
        applied: False when a guard suppressed the status write
        context: Additional context data
    """
    bound_logger = logger.bind(
        result_id=result_id,
        from_state=from_state,
        to_state=to_state,
        trigger=trigger,
        applied=applied,
    )

    if context:
        bound_logger = bound_logger.bind(context=context)

    if applied:
        bound_logger.info("state_transition")
    else:
        bound_logger.info("state_transition_suppressed")


def log_event_divergence(
    logger: FilteringBoundLogger,
    result_id: str,
    event_kind: str,
    event_time: datetime,
    error: Exception
) -> None:
    """
    Log that an event was appended but the record save failed.

    The campaign event log is then ahead of the stored status until a
    later transition or a manual reconciliation catches it up.

    Args:
        logger: Structlog logger instance
        result_id: External identifier of the result
        event_kind: Kind of the event already appended
        event_time: Recorded time of that event
        error: Exception raised by the save
    """
    logger.error(
        "event_log_divergence",
        result_id=result_id,
        event_kind=event_kind,
        event_time=event_time.isoformat(),
        error=str(error),
        error_type=type(error).__name__,
    )

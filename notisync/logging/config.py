"""
Centralized logging configuration for the notisync engine.

This module provides standardized logging configuration using structlog
for all components. Adapters, the reconciler and the engine all obtain
their loggers from here so that every reconciliation pass produces one
consistent, structured audit trail.
"""
import logging
import sys
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


def get_reconcile_logger(name: str) -> FilteringBoundLogger:
    """
    Get a logger bound for reconciliation decisions.

    Every classified diff pair is logged through this logger so a pass can
    be replayed from the logs alone.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger for reconciliation decisions
    """
    logger = get_logger(name)

    return logger.bind(
        subsystem="reconciler",
        audit_trail=True
    )


def get_sink_logger(name: str) -> FilteringBoundLogger:
    """Get a logger bound for action execution against collaborators."""
    logger = get_logger(name)

    return logger.bind(
        subsystem="action_sink",
        audit_trail=True
    )


def log_action_decision(
    logger: FilteringBoundLogger,
    identity: Any,
    action: str,
    reason: str,
    context: Optional[dict[str, Any]] = None
) -> None:
    """
    Log a reconciliation decision with standardized format.

    Args:
        logger: Structlog logger instance
        identity: Identity of the entity being classified
        action: Resulting action kind (notify, remove, noop)
        reason: Why the pair was classified this way
        context: Additional context data
    """
    bound_logger = logger.bind(
        identity=identity,
        action=action,
        reason=reason,
        event="action_decision"
    )

    if context:
        bound_logger = bound_logger.bind(context=context)

    if action == "noop":
        bound_logger.debug("Action decided")
    else:
        bound_logger.info("Action decided")

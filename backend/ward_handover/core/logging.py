"""
Structured logging configuration for Ward Handover.

Console output in development, one JSON object per line in production.
Library loggers that chatter at DEBUG (aiosqlite, the SQLAlchemy engine)
are held at WARNING unless the application itself runs at DEBUG.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor

NOISY_LOGGERS = ("aiosqlite", "sqlalchemy.engine", "multipart")


def add_app_context(
    logger: logging.Logger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Tag every entry with the service name."""
    event_dict.setdefault("app", "ward-handover")
    return event_dict


def setup_logging(log_level: str = "INFO", json_logs: bool = False) -> None:
    """
    Configure structlog on top of the standard library root logger.

    Args:
        log_level: Minimum log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_logs: If True, render JSON lines instead of coloured console output
    """
    level = getattr(logging, log_level.upper(), logging.INFO)
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)

    if level > logging.DEBUG:
        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        add_app_context,
    ]
    if json_logs:
        processors += [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Structured logger, typically named after the calling module."""
    return structlog.get_logger(name)


class AuditLogger:
    """
    Specialized logger for the patient-record audit trail.

    Every change to a patient, handover note or review entry is recorded
    with the acting author (free text, there is no login) and the action.
    Record contents are never logged, only identifiers.
    """

    def __init__(self):
        """Initialize audit logger."""
        self.logger = get_logger("audit")

    def log_access(
        self,
        resource_type: str,
        resource_id: str,
        action: str,
        actor: str | None = None,
        success: bool = True,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Log a resource access event.

        Args:
            resource_type: Type of resource (e.g., "patient", "handover_note")
            resource_id: ID of the accessed resource
            action: Action performed (e.g., "CREATE", "DISCHARGE")
            actor: Author name supplied with the change, if any
            success: Whether the action succeeded
            details: Additional details
        """
        log_method = self.logger.info if success else self.logger.warning
        log_method(
            "resource_access",
            actor=actor,
            resource_type=resource_type,
            resource_id=resource_id,
            action=action,
            success=success,
            details=details or {},
            audit_type="access",
        )

    def log_status_change(
        self,
        entry_id: str,
        old_status: str,
        new_status: str,
        completed_dates: int,
        total_dates: int,
    ) -> None:
        """
        Log a Hospital at Night review status transition.

        Args:
            entry_id: ID of the review entry
            old_status: Status before the transition
            new_status: Status after the transition
            completed_dates: Number of review dates carrying a completion stamp
            total_dates: Number of review dates on the entry
        """
        self.logger.info(
            "review_status_change",
            entry_id=entry_id,
            old_status=old_status,
            new_status=new_status,
            completed_dates=completed_dates,
            total_dates=total_dates,
            audit_type="status",
        )


# Global audit logger instance
audit_logger = AuditLogger()

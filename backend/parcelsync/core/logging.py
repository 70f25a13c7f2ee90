import logging
import sys
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import Any
import structlog
from parcelsync.core.config import settings, get_absolute_path


def setup_logging() -> None:
    """Configure structured logging for the application."""

    handlers = [logging.StreamHandler(sys.stdout)]

    # One file per day, older files pruned after the retention window
    if settings.LOG_DIR:
        log_dir: Path = get_absolute_path(settings.LOG_DIR)
        log_dir.mkdir(parents=True, exist_ok=True)
        handlers.append(TimedRotatingFileHandler(
            log_dir / "parcelsync.log",
            when="midnight",
            backupCount=settings.LOG_RETENTION_DAYS,
            encoding="utf-8"
        ))

    # Configure standard library logging
    logging.basicConfig(
        format="%(message)s",
        handlers=handlers,
        level=getattr(logging, settings.LOG_LEVEL.upper()),
    )

    # Configure structlog
    structlog.configure(
        processors=[
            # Add timestamp
            structlog.processors.TimeStamper(fmt="ISO"),
            # Add log level
            structlog.processors.add_log_level,
            # Add caller info
            structlog.processors.CallsiteParameterAdder(
                parameters=[structlog.processors.CallsiteParameter.PATHNAME,
                            structlog.processors.CallsiteParameter.FUNC_NAME,
                            structlog.processors.CallsiteParameter.LINENO]
            ),
            # JSON formatting for structured logs
            structlog.processors.JSONRenderer(ensure_ascii=False)
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> Any:
    """Get a configured logger instance."""
    return structlog.get_logger(name)

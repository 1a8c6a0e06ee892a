"""Structured logging configuration using structlog."""

import logging
import sys
import uuid
from typing import Any, Optional

import structlog
from structlog.types import FilteringBoundLogger

from fallback_webhook.config import settings


def setup_logging() -> None:
    """Configure structured logging for the application."""

    level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    # Configure structlog
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.CallsiteParameterAdder(
                parameters={
                    structlog.processors.CallsiteParameter.FILENAME,
                    structlog.processors.CallsiteParameter.FUNC_NAME,
                    structlog.processors.CallsiteParameter.LINENO,
                }
            ),
            structlog.processors.JSONRenderer(ensure_ascii=False)
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # Configure standard library logging
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=level,
    )

    # Reduce noise from external libraries
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("google.auth").setLevel(logging.WARNING)
    logging.getLogger("firebase_admin").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def get_logger(name: Optional[str] = None) -> FilteringBoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name or __name__)


class CorrelationContextManager:
    """Context manager for correlation ID tracking."""

    def __init__(self, correlation_id: Optional[str] = None):
        self.correlation_id = correlation_id or str(uuid.uuid4())
        self.token = None

    def __enter__(self):
        self.token = structlog.contextvars.bind_contextvars(
            correlation_id=self.correlation_id
        )
        return self.correlation_id

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.token:
            structlog.contextvars.unbind_contextvars("correlation_id")


def log_fallback_decision(
    logger: FilteringBoundLogger,
    user_id: str,
    decision: str,
    elapsed_ms: Optional[int] = None,
    **kwargs: Any
) -> None:
    """Log cooldown decisions with consistent format."""
    logger.info(
        f"Fallback {decision} for user {user_id}",
        user_id=user_id,
        fallback_decision=decision,
        elapsed_ms=elapsed_ms,
        **kwargs
    )


def log_api_request(
    logger: FilteringBoundLogger,
    method: str,
    path: str,
    status_code: int,
    duration_ms: float,
    **kwargs: Any
) -> None:
    """Log API requests with consistent format."""
    logger.info(
        f"{method} {path} - {status_code}",
        http_method=method,
        http_path=path,
        http_status=status_code,
        duration_ms=duration_ms,
        **kwargs
    )


def log_store_operation(
    logger: FilteringBoundLogger,
    backend: str,
    operation: str,
    key: str,
    success: bool,
    duration_ms: float,
    **kwargs: Any
) -> None:
    """Log store reads and writes with consistent format."""
    level = "debug" if success else "error"
    getattr(logger, level)(
        f"{backend} store {operation}: {key}",
        store_backend=backend,
        operation=operation,
        key=key,
        success=success,
        duration_ms=duration_ms,
        **kwargs
    )

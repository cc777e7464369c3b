"""
Structured Logger - Infrastructure Layer

Thin wrapper around Python's stdlib logging that emits JSON-structured
records. Infrastructure components (stores, wiring) log through it so
roadmap_id, user_id and similar values land as separate JSON fields.

configure_logging() installs the same JSON formatter on the root logger,
so plain stdlib loggers that pass ``extra={"structured_context": {...}}``
(the HTTP middlewares) produce identical records.
"""
import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional


class StructuredLogger:
    """
    JSON-structured logger wrapping Python stdlib logging.

    Usage:
        logger = StructuredLogger("infrastructure.persistence")
        logger.info("Saving roadmap", roadmap_id="ab12")
        logger.error("Write failed", error=exc, roadmap_id="ab12")
        logger.log_roadmap_saved("ab12", "user-1", total_steps=8, progress=25)
    """

    def __init__(self, name: str, level: int = logging.INFO) -> None:
        self._logger = logging.getLogger(name)
        self._name = name

        # Attach a JSON handler only once per logger name
        if not self._logger.handlers:
            handler = logging.StreamHandler(sys.stdout)
            handler.setFormatter(_JsonFormatter())
            self._logger.addHandler(handler)
            self._logger.propagate = False

        self._logger.setLevel(level)

    # ------------------------------------------------------------------
    # Core log methods
    # ------------------------------------------------------------------

    def debug(self, message: str, **context: Any) -> None:
        """Log at DEBUG level with optional structured context fields."""
        self._emit(logging.DEBUG, message, **context)

    def info(self, message: str, **context: Any) -> None:
        """Log at INFO level with optional structured context fields."""
        self._emit(logging.INFO, message, **context)

    def warning(self, message: str, **context: Any) -> None:
        """Log at WARNING level with optional structured context fields."""
        self._emit(logging.WARNING, message, **context)

    def error(self, message: str, error: Optional[Exception] = None, **context: Any) -> None:
        """
        Log at ERROR level with optional exception detail.

        Args:
            message: Human-readable error description.
            error:   The exception instance (optional). Its type and str() are
                     added to the structured record automatically.
            **context: Additional key-value fields to include in the JSON record.
        """
        if error is not None:
            context["error_type"] = type(error).__name__
            context["error_detail"] = str(error)
        self._emit(logging.ERROR, message, **context)

    # ------------------------------------------------------------------
    # Domain-specific convenience methods
    # ------------------------------------------------------------------

    def log_roadmap_saved(self, roadmap_id: str, user_id: str, total_steps: int,
                          progress: int, is_active: bool = True) -> None:
        """Emit an INFO record after a roadmap document has been written."""
        self.info(
            "Roadmap saved",
            roadmap_id=roadmap_id,
            user_id=user_id,
            total_steps=total_steps,
            progress=progress,
            is_active=is_active,
        )

    def log_user_registered(self, user_id: str, email: str) -> None:
        """Emit an INFO record when a new account is stored."""
        self.info("User registered", user_id=user_id, email=email)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _emit(self, level: int, message: str, **context: Any) -> None:
        """Build structured record and forward to stdlib logger."""
        extra = {"structured_context": context}
        self._logger.log(level, message, extra=extra)


class _JsonFormatter(logging.Formatter):
    """
    Formats log records as single-line JSON objects.

    Output example:
        {"ts": "2026-02-27T10:00:00+00:00", "level": "INFO", "logger": "roadmaps",
         "message": "Roadmap saved", "roadmap_id": "ab12"}
    """

    def format(self, record: logging.LogRecord) -> str:  # noqa: A003
        payload: Dict[str, Any] = {
            "ts": datetime.now(tz=timezone.utc).isoformat(timespec="seconds"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        # Merge any structured context fields
        context = getattr(record, "structured_context", {})
        payload.update(context)

        # Include exception traceback if present
        if record.exc_info:
            payload["traceback"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=str)


def configure_logging(level: int = logging.INFO) -> None:
    """Route the root logger through the JSON formatter (idempotent)."""
    root = logging.getLogger()
    root.setLevel(level)
    for handler in root.handlers:
        if isinstance(handler.formatter, _JsonFormatter):
            return
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(_JsonFormatter())
    root.addHandler(handler)


def get_logger(name: str, level: int = logging.INFO) -> StructuredLogger:
    """
    Factory function for obtaining a StructuredLogger.

    Preferred over direct instantiation so callers don't need to import
    the class; just import get_logger.

    Example:
        from infrastructure.logging import get_logger
        logger = get_logger(__name__)
    """
    return StructuredLogger(name, level)

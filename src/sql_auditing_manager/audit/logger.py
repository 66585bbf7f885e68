"""Structured operation logging."""

import logging
import os
import sys
import threading
import uuid
from contextlib import suppress
from datetime import UTC, datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

import structlog
from structlog.types import EventDict

LOG_FILE_NAME = "sqlaudit.log"
SENSITIVE_KEYS = frozenset(
    {"password", "secret", "key", "token", "access_key", "connection_string"}
)

# Global instances
_LOGGER_INSTANCE: structlog.BoundLogger | None = None
_logger_lock = threading.Lock()


def get_log_dir(base_dir: str | Path | None = None) -> Path:
    """Get normalized log directory path.

    Args:
        base_dir: Base directory for logs. If None, uses ~/.local/log

    Returns:
        Resolved Path object for log directory
    """
    if base_dir is None:
        base_dir = Path.home() / ".local" / "log"
    return Path(base_dir).resolve()


def create_secure_handler(
    log_path: Path, max_bytes: int, backup_count: int
) -> RotatingFileHandler:
    """Create a RotatingFileHandler whose file is only readable by owner and group.

    Args:
        log_path: Path to the log file
        max_bytes: Maximum size of each log file
        backup_count: Number of backup files to keep

    Returns:
        Configured RotatingFileHandler instance
    """
    os.makedirs(log_path.parent, mode=0o750, exist_ok=True)
    if not log_path.exists():
        log_path.touch(mode=0o640)
    os.chmod(log_path, 0o640)

    return RotatingFileHandler(
        str(log_path), maxBytes=max_bytes, backupCount=backup_count
    )


def add_timestamp(
    _: structlog.BoundLogger, __: str, event_dict: EventDict
) -> EventDict:
    """Add ISO 8601 timestamp."""
    event_dict["timestamp"] = datetime.now(UTC).isoformat()
    return event_dict


def sanitize_keys(
    event_dict: dict[str, Any], sensitive_keys: set[str] | frozenset[str] = SENSITIVE_KEYS
) -> dict[str, Any]:
    """Redact sensitive keys, case-insensitively and through nested structures.

    Args:
        event_dict: Dictionary to sanitize
        sensitive_keys: Keys whose values are replaced by ``***``

    Returns:
        Sanitized copy of the dictionary
    """
    lowered = {key.lower() for key in sensitive_keys}

    def _sanitize_value(key: str, value: Any) -> Any:
        if key.lower() in lowered:
            return "***"
        if isinstance(value, dict):
            return sanitize_keys(value, sensitive_keys)
        if isinstance(value, list):
            return [_sanitize_value("", item) for item in value]
        return value

    return {k: _sanitize_value(k, v) for k, v in event_dict.items()}


def sanitize_event_dict(
    _: structlog.BoundLogger, __: str, event_dict: EventDict
) -> EventDict:
    """Mask sensitive values before rendering."""
    return sanitize_keys(dict(event_dict))


def configure_logger(
    log_level: str = "INFO",
    correlation_id: str | None = None,
    max_log_size: int = 10 * 1024 * 1024,  # 10 MB
    backup_count: int = 5,
    base_dir: str | Path | None = None,
) -> structlog.BoundLogger:
    """Configure structlog and the root logger, and return a bound logger.

    For normal usage, prefer setup_logging() which also tracks the global instance.

    Args:
        log_level: Log level (default: INFO)
        correlation_id: Optional correlation ID tying together one invocation
        max_log_size: Maximum size of a log file before rotation
        backup_count: Number of backup files to keep
        base_dir: Optional base directory for log files

    Returns:
        A configured structlog.BoundLogger instance
    """
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            add_timestamp,
            sanitize_event_dict,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    # Records are rendered to JSON by structlog already
    file_handler = create_secure_handler(
        get_log_dir(base_dir) / LOG_FILE_NAME, max_log_size, backup_count
    )
    file_handler.setFormatter(logging.Formatter("%(message)s"))

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.WARNING)
    console_handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_level.upper()))
    for handler in root_logger.handlers[:]:
        with suppress(Exception):
            handler.close()
        root_logger.removeHandler(handler)
    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    return structlog.get_logger("sqlaudit").bind(
        correlation_id=correlation_id or str(uuid.uuid4())
    )


def setup_logging(
    *,
    log_level: str = "INFO",
    correlation_id: str | None = None,
    max_log_size: int = 10 * 1024 * 1024,
    backup_count: int = 5,
    base_dir: str | Path | None = None,
) -> structlog.BoundLogger:
    """Setup structured logging and make the result the global logger.

    Args:
        log_level: Log level (default: INFO)
        correlation_id: Optional correlation ID tying together one invocation
        max_log_size: Maximum size of a log file before rotation
        backup_count: Number of backup files to keep
        base_dir: Optional base directory for log files

    Returns:
        The configured logger instance.
    """
    global _LOGGER_INSTANCE

    with suppress(Exception):
        structlog.reset_defaults()

    new_logger = configure_logger(
        log_level=log_level,
        correlation_id=correlation_id,
        max_log_size=max_log_size,
        backup_count=backup_count,
        base_dir=base_dir,
    )
    with _logger_lock:
        _LOGGER_INSTANCE = new_logger
    return new_logger


def get_logger() -> structlog.BoundLogger:
    """Get the global logger, configuring one with defaults if needed."""
    global _LOGGER_INSTANCE

    with _logger_lock:
        if _LOGGER_INSTANCE is None:
            _LOGGER_INSTANCE = configure_logger()
        return _LOGGER_INSTANCE


def reset_logger() -> None:
    """Close handlers, reset structlog and forget the global logger.

    Safe to call repeatedly.
    """
    global _LOGGER_INSTANCE
    root_logger = logging.getLogger()

    for handler in root_logger.handlers[:]:
        with suppress(Exception):
            handler.close()
        root_logger.removeHandler(handler)

    with suppress(Exception):
        structlog.reset_defaults()

    with _logger_lock:
        _LOGGER_INSTANCE = None


def audit_event(
    *,
    operation: str,
    user: str,
    success: bool,
    details: dict[str, Any] | None = None,
    error: Exception | None = None,
) -> None:
    """Log an audit event.

    Args:
        operation: Audited operation (e.g., "policy.update")
        user: Username or identifier
        success: Whether the operation succeeded
        details: Optional event details
        error: Optional exception if operation failed
    """
    event: dict[str, Any] = {
        "operation": str(getattr(operation, "value", operation)),
        "user": user,
        "success": success,
    }
    if details:
        event["details"] = sanitize_keys(details)
    if error:
        event["error"] = {
            "type": type(error).__name__,
            "message": str(error),
        }

    logger = get_logger().bind(**event)
    if success:
        logger.info("audit_event")
    else:
        logger.error("audit_event")

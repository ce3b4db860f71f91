"""
Vesting Lock - Structured Logging Configuration

Configures JSON logging for the validator and the CLI:
- JSON format for easy parsing and aggregation
- Optional rotating log file
- Plain text console output when JSON is disabled

Usage:
    from vesting_lock.core.logging_config import setup_logging

    logger = setup_logging(name="vesting_lock", level="DEBUG")
    logger.info("Group verified", extra={"lock_hash": "0x..", "code": 0})
"""

import logging
import logging.handlers
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from pythonjsonlogger import jsonlogger

from vesting_lock.core.config import Config

TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """
    JSON formatter with additional context fields.

    Adds timestamp, environment, service and source location to all log
    records.
    """

    def __init__(
        self,
        fmt: str = "%(timestamp)s %(level)s %(name)s %(message)s",
        timestamp: bool = True,
        environment: Optional[str] = None,
        service_name: str = "vesting_lock",
    ):
        super().__init__(fmt=fmt)
        self.timestamp = timestamp
        self.environment = environment or "production"
        self.service_name = service_name

    def add_fields(
        self,
        log_record: Dict[str, Any],
        record: logging.LogRecord,
        message_dict: Dict[str, Any],
    ) -> None:
        """Add custom fields to log record."""
        super().add_fields(log_record, record, message_dict)

        if self.timestamp and not log_record.get("timestamp"):
            log_record["timestamp"] = datetime.now(timezone.utc).isoformat()

        log_record["environment"] = self.environment
        log_record["service"] = self.service_name

        if not log_record.get("level"):
            log_record["level"] = record.levelname.lower()

        log_record["source"] = {
            "function": record.funcName,
            "module": record.module,
            "line": record.lineno,
        }


def setup_logging(
    name: str = "vesting_lock",
    log_file: Optional[str] = None,
    level: str = "INFO",
    environment: str = "production",
    json_output: bool = True,
    enable_console: bool = True,
    max_bytes: int = 10 * 1024 * 1024,  # 10MB
    backup_count: int = 5,
    stream=None,
) -> logging.Logger:
    """
    Setup logging for the vesting lock package.

    Args:
        name: Logger name (typically the package name)
        log_file: Path to a log file (optional)
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        environment: Environment identifier (dev, staging, prod)
        json_output: Emit JSON records instead of plain text
        enable_console: Whether to log to the console
        max_bytes: Maximum log file size before rotation
        backup_count: Number of backup files to keep
        stream: Console stream, defaults to stderr

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, level.upper()))

    # Remove existing handlers to avoid duplicates
    logger.handlers = []

    if json_output:
        formatter: logging.Formatter = CustomJsonFormatter(
            environment=environment,
            service_name=name.split(".")[0],
        )
    else:
        formatter = logging.Formatter(TEXT_FORMAT)

    if enable_console:
        console_handler = logging.StreamHandler(stream or sys.stderr)
        console_handler.setLevel(getattr(logging, level.upper()))
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if log_file:
        try:
            log_path = Path(log_file)
            log_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.handlers.RotatingFileHandler(
                filename=log_file,
                maxBytes=max_bytes,
                backupCount=backup_count,
            )
            file_handler.setLevel(getattr(logging, level.upper()))
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)
        except OSError as e:
            logger.warning("Could not create file handler for %s: %s", log_file, e)

    return logger


def setup_logging_from_config(config: Config, stream=None) -> logging.Logger:
    """Configure the package logger from a ``Config`` snapshot."""
    return setup_logging(
        name="vesting_lock",
        log_file=config.LOG_FILE,
        level=config.LOG_LEVEL,
        environment=config.ENVIRONMENT,
        json_output=config.LOG_JSON,
        stream=stream,
    )


def get_logger(name: str, level: str = "INFO") -> logging.Logger:
    """
    Get or create a logger with standard configuration.

    Loggers below the package root inherit its handlers, so only a bare
    top-level name is configured here.
    """
    logger = logging.getLogger(name)
    if "." not in name and not logger.handlers:
        return setup_logging(name=name, level=level)
    return logger

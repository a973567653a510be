"""
Logging utilities with structured formatting.
"""
import json
import logging
import logging.handlers
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional, Union


class JsonFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def __init__(self, **kwargs):
        """Initialize with optional fields."""
        self.additional_fields = kwargs
        super().__init__()

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "line": record.lineno,
        }

        # Render context if available
        for field in ("template", "layouts", "locale", "template_dir"):
            if hasattr(record, field):
                log_data[field] = getattr(record, field)

        if record.exc_info:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": self.formatException(record.exc_info),
            }

        log_data.update(self.additional_fields)

        return json.dumps(log_data, default=str)


class EngineLoggerAdapter(logging.LoggerAdapter):
    """Logger adapter that adds engine context to log records."""

    def process(self, msg, kwargs):
        """Add context to log records."""
        kwargs.setdefault("extra", {}).update(self.extra)
        return msg, kwargs


def configure_logging(
    log_level: Union[str, int] = "INFO",
    json_logging: bool = False,
    log_file: Optional[Union[str, Path]] = None,
    max_bytes: int = 10 * 1024 * 1024,  # 10 MB
    backup_count: int = 5,
    log_to_console: bool = True,
) -> None:
    """
    Configure root logging for applications embedding the engine.

    Args:
        log_level: Logging level name or number
        json_logging: Whether to emit JSON records
        log_file: Optional rotating log file
        max_bytes: Maximum size of log file before rotation
        backup_count: Number of backup files to keep
        log_to_console: Whether to log to stdout
    """
    if isinstance(log_level, str):
        log_level = getattr(logging, log_level.upper(), logging.INFO)

    handlers = []

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.handlers.RotatingFileHandler(
            log_path,
            maxBytes=max_bytes,
            backupCount=backup_count,
        ))

    if log_to_console:
        handlers.append(logging.StreamHandler(sys.stdout))

    if json_logging:
        formatter = JsonFormatter(application="templatekit")
    else:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s"
        )

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    for handler in handlers:
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    logging.debug(f"Logging configured with level: {logging.getLevelName(log_level)}")


def get_logger(name: str, **context) -> Union[logging.Logger, EngineLoggerAdapter]:
    """
    Get a logger with context.

    Args:
        name: Logger name
        **context: Additional context fields

    Returns:
        Logger with context
    """
    logger = logging.getLogger(name)

    if context:
        return EngineLoggerAdapter(logger, context)

    return logger

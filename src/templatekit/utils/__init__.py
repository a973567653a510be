"""
Utility modules for the template engine.
"""
from .logging import configure_logging, get_logger, JsonFormatter, EngineLoggerAdapter

__all__ = [
    "configure_logging",
    "get_logger",
    "JsonFormatter",
    "EngineLoggerAdapter",
]

"""
Error handling for the template engine.
"""
from .exceptions import (
    ErrorContext,
    TemplateEngineError,
    ConfigurationError,
    InitializationError,
    NoTemplateDirectoryError,
    TemplateParsingError,
    NoTemplatesParsedError,
    EngineNotInitializedError,
    TemplateNotFoundError,
    LayoutNotFoundError,
    TemplateExecutionError,
)

__all__ = [
    "ErrorContext",
    "TemplateEngineError",
    "ConfigurationError",
    "InitializationError",
    "NoTemplateDirectoryError",
    "TemplateParsingError",
    "NoTemplatesParsedError",
    "EngineNotInitializedError",
    "TemplateNotFoundError",
    "LayoutNotFoundError",
    "TemplateExecutionError",
]

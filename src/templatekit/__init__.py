"""
Template composition and render caching on top of Jinja2.
"""

from .engine import TemplateEngine
from .context import RenderContext
from .config import EngineConfiguration
from .error import (
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

__version__ = "1.0.0"

__all__ = [
    'TemplateEngine',
    'RenderContext',
    'EngineConfiguration',
    'TemplateEngineError',
    'ConfigurationError',
    'InitializationError',
    'NoTemplateDirectoryError',
    'TemplateParsingError',
    'NoTemplatesParsedError',
    'EngineNotInitializedError',
    'TemplateNotFoundError',
    'LayoutNotFoundError',
    'TemplateExecutionError',
]

"""
Centralized exception definitions for the template engine.
"""
from typing import Optional


class ErrorContext:
    """Context information for errors."""

    def __init__(self, component: str = None, operation: str = None, **kwargs):
        self.component = component
        self.operation = operation
        self.details = kwargs


class TemplateEngineError(Exception):
    """Base class for all template engine errors."""

    def __init__(self, message: str, context: ErrorContext = None, details: dict = None):
        super().__init__(message)
        self.context = context or ErrorContext()
        self.details = details or {}

    def __str__(self):
        base_str = super().__str__()
        if self.context.component and self.context.operation:
            return f"{base_str} [in {self.context.component}.{self.context.operation}]"
        return base_str


class ConfigurationError(TemplateEngineError):
    """Error in configuration."""
    pass


class InitializationError(TemplateEngineError):
    """Error during engine construction. The engine is not usable."""
    pass


class NoTemplateDirectoryError(InitializationError):
    """Template directory missing or not provided."""
    pass


class TemplateParsingError(InitializationError):
    """A template file failed to compile."""

    def __init__(self, message: str, template: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.template = template


class NoTemplatesParsedError(InitializationError):
    """The template directory produced no templates."""
    pass


class EngineNotInitializedError(TemplateEngineError):
    """Render called on an engine that was never constructed."""

    def __init__(self, message: str = "template engine not initialized", **kwargs):
        super().__init__(message, **kwargs)


class TemplateNotFoundError(TemplateEngineError):
    """Base template missing at render time."""

    def __init__(self, name: str, message: Optional[str] = None, **kwargs):
        super().__init__(message or f"template not found: {name}", **kwargs)
        self.name = name


class LayoutNotFoundError(TemplateNotFoundError):
    """Layout name missing from the registry during chain resolution."""

    def __init__(self, name: str, **kwargs):
        super().__init__(name, f"layout not found: {name}", **kwargs)


class TemplateExecutionError(TemplateEngineError):
    """Template execution failed.

    ``layout_index`` is ``None`` when the base template failed, otherwise the
    position of the failing layout in the requested chain.
    """

    def __init__(self, template: str, layout_index: Optional[int] = None, message: Optional[str] = None, **kwargs):
        if message is None:
            where = "base template" if layout_index is None else f"layout #{layout_index}"
            message = f"template execution failed: {where} '{template}'"
        super().__init__(message, **kwargs)
        self.template = template
        self.layout_index = layout_index

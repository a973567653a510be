"""
Per-render request context: locale, context values and translation.
"""
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Mapping, Optional

# translator(locale, key, params) -> translated text
Translator = Callable[[str, str, Dict[str, str]], str]


@dataclass(frozen=True)
class RenderContext:
    """Request-scoped data made available to templates through ``T`` and ``ctx_val``."""

    locale: Optional[str] = None
    values: Mapping[str, Any] = field(default_factory=dict)
    translator: Optional[Translator] = None

    def with_values(self, **values) -> "RenderContext":
        """Return a copy with extra context values."""
        merged = dict(self.values)
        merged.update(values)
        return RenderContext(locale=self.locale, values=merged, translator=self.translator)


def resolve_locale(ctx: Optional[RenderContext], default: str) -> str:
    """Locale of the context, or ``default`` when it has none."""
    if ctx is not None and ctx.locale:
        return ctx.locale
    return default


def get_translator(ctx: Optional[RenderContext], locale: str) -> Callable[..., str]:
    """
    Build the ``T(key, *args)`` template function for a context.

    With a translator, args are read as key/value pairs and passed as params.
    Without one, the key is returned as is, formatted positionally when args
    are given.
    """
    translator = ctx.translator if ctx is not None else None

    if translator is None:
        def translate(key: str, *args) -> str:
            if not args:
                return key
            return key.format(*args)
        return translate

    def translate(key: str, *args) -> str:
        params = {str(args[i]): str(args[i + 1]) for i in range(0, len(args) - 1, 2)}
        return translator(locale, key, params)
    return translate


def ctx_value(ctx: Optional[RenderContext]) -> Callable[[str], str]:
    """Build the ``ctx_val(key)`` template function; missing keys give ``""``."""
    values = ctx.values if ctx is not None else {}

    def lookup(key: str) -> str:
        value = values.get(key)
        if value is None:
            return ""
        return str(value)
    return lookup

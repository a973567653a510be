"""
Template engine: composes content templates with layout wrappers and caches
the rendered output.
"""
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, TextIO, Union

from markupsafe import Markup

from .config.configuration import EngineConfiguration, ensure_engine_config
from .context import RenderContext, ctx_value, get_translator, resolve_locale
from .error.exceptions import (
    EngineNotInitializedError,
    ErrorContext,
    TemplateExecutionError,
    TemplateNotFoundError,
)
from .templates.buffers import BufferPool, reset_buffer
from .templates.cache import RenderCache, build_cache_key
from .templates.functions import (
    CONTEXT_FUNCTION,
    EMBED_FUNCTION,
    TRANSLATE_FUNCTION,
    default_functions,
    embed_function,
)
from .templates.layout import LayoutChainResolver
from .templates.registry import TemplateRegistry
from .utils.logging import get_logger


class TemplateEngine:
    """
    Renders named templates wrapped in zero or more layouts.

    The engine owns its registry and caches, so separate instances never
    share state. A single instance is safe to use from many threads.

    Layouts call ``embed()`` to insert the content rendered before them. The
    first layout wraps the base template, each further layout wraps the
    previous layout's output.
    """

    def __init__(
        self,
        config: Union[EngineConfiguration, Dict[str, Any], str, Path, None] = None,
        functions: Optional[Mapping[str, Callable[..., Any]]] = None,
    ):
        """
        Build the engine and compile every template under the template directory.

        Args:
            config: Engine configuration, a mapping of its fields, or a template directory
            functions: Extra template functions; they override defaults of the same name

        Raises:
            ConfigurationError: Invalid configuration
            NoTemplateDirectoryError: Template directory missing
            TemplateParsingError: A template failed to compile
            NoTemplatesParsedError: No template files found
        """
        self.config = ensure_engine_config(config)
        self._logger = get_logger(__name__, template_dir=str(self.config.template_dir))

        self._functions = default_functions()
        if functions:
            self._functions.update(functions)

        registry = TemplateRegistry.from_directory(self.config, self._functions)
        self._layouts = LayoutChainResolver(registry, cache_enabled=self.config.layout_cache)
        self._cache = RenderCache(shards=self.config.cache_shards)
        self._buffers = BufferPool()

        if self.config.common_layouts:
            warmed = self._layouts.precompile(self.config.common_layouts)
            self._logger.debug(f"Pre-resolved common layouts: {warmed}")

        self._registry = registry

    def _require_registry(self, operation: str) -> TemplateRegistry:
        registry = getattr(self, "_registry", None)
        if registry is None:
            raise EngineNotInitializedError(context=ErrorContext(component="engine", operation=operation))
        return registry

    def render(
        self,
        ctx: Optional[RenderContext],
        out: TextIO,
        name: str,
        binding: Any = None,
        *layouts: str,
    ) -> None:
        """
        Render template ``name`` wrapped in ``layouts`` and write it to ``out``.

        Nothing is written when rendering fails.

        Args:
            ctx: Request context for translation and context values
            out: Text sink with a ``write`` method
            name: Base template name
            binding: Data passed to the base template and every layout
            layouts: Layout names in wrap order

        Raises:
            EngineNotInitializedError: Engine was never constructed
            TemplateNotFoundError: Base template missing
            LayoutNotFoundError: A layout is missing
            TemplateExecutionError: A template raised while rendering
        """
        registry = self._require_registry("render")
        locale = resolve_locale(ctx, self.config.default_locale)

        cache_key = None
        if self.config.render_cache:
            cache_key = build_cache_key(self.config.hard_cache, locale, name, binding, layouts)
            cached = self._cache.get(cache_key)
            if cached is not None:
                self._logger.debug(f"Render cache hit for {name}", extra={"template": name, "locale": locale})
                out.write(cached)
                return
            self._logger.debug(f"Render cache miss for {name}", extra={"template": name, "locale": locale})

        content = self._render_content(registry, ctx, locale, name, binding, layouts)

        if cache_key is not None:
            self._cache.put(cache_key, content)

        out.write(content)

    def _render_content(
        self,
        registry: TemplateRegistry,
        ctx: Optional[RenderContext],
        locale: str,
        name: str,
        binding: Any,
        layouts: tuple,
    ) -> str:
        base = registry.lookup(name)
        if base is None:
            raise TemplateNotFoundError(name, context=ErrorContext(component="engine", operation="render"))

        context_functions = {
            TRANSLATE_FUNCTION: get_translator(ctx, locale),
            CONTEXT_FUNCTION: ctx_value(ctx),
        }

        with self._buffers.acquire() as buffer:
            try:
                base.execute(buffer, binding, context_functions)
            except Exception as e:
                raise TemplateExecutionError(name) from e

            chain = self._layouts.resolve(layouts)

            content = buffer.getvalue()
            for index, layout in enumerate(chain):
                reset_buffer(buffer)
                layout_functions = dict(context_functions)
                layout_functions[EMBED_FUNCTION] = embed_function(content)
                try:
                    layout.execute(buffer, binding, layout_functions)
                except Exception as e:
                    raise TemplateExecutionError(layout.name, layout_index=index) from e
                content = buffer.getvalue()

        self._logger.debug(
            f"Rendered {name} with {len(chain)} layouts",
            extra={"template": name, "layouts": list(layouts), "locale": locale},
        )
        return content

    def render_to_string(
        self,
        ctx: Optional[RenderContext],
        name: str,
        binding: Any = None,
        *layouts: str,
    ) -> str:
        """Render to a string. See :meth:`render`."""
        self._require_registry("render_to_string")
        with self._buffers.acquire() as buffer:
            self.render(ctx, buffer, name, binding, *layouts)
            return buffer.getvalue()

    def render_to_markup(
        self,
        ctx: Optional[RenderContext],
        name: str,
        binding: Any = None,
        *layouts: str,
    ) -> Markup:
        """Render to trusted markup that is not escaped again when embedded elsewhere."""
        return Markup(self.render_to_string(ctx, name, binding, *layouts))

    def get_functions(self) -> Dict[str, Callable[..., Any]]:
        """Copy of the base function set available to templates."""
        self._require_registry("get_functions")
        return dict(self._functions)

    def template_names(self) -> List[str]:
        """Sorted names of all registered templates."""
        return self._require_registry("template_names").names()

    def has_template(self, name: str) -> bool:
        return name in self._require_registry("has_template")

    def cache_info(self) -> Dict[str, Any]:
        """Render and layout chain cache statistics."""
        self._require_registry("cache_info")
        info: Dict[str, Any] = dict(self._cache.info())
        info["layout_chains"] = len(self._layouts)
        info["hard_cache"] = self.config.hard_cache
        return info


"""
Template registry: compiled templates indexed by logical name.
"""
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional

from jinja2 import TemplateSyntaxError

from ...config.configuration import EngineConfiguration
from ...error.exceptions import (
    ErrorContext,
    NoTemplateDirectoryError,
    NoTemplatesParsedError,
    TemplateParsingError,
)
from ..compiled import CompiledTemplate, JinjaTemplate, create_environment
from ..loader import walk_templates

logger = logging.getLogger(__name__)


class TemplateRegistry:
    """Immutable name -> CompiledTemplate mapping.

    Built once; lookups afterwards are plain reads and need no locking.
    """

    def __init__(self, templates: Mapping[str, CompiledTemplate]):
        self._templates = MappingProxyType(dict(templates))

    def lookup(self, name: str) -> Optional[CompiledTemplate]:
        """Return the template registered under ``name``, or None."""
        return self._templates.get(name)

    def names(self) -> List[str]:
        """Sorted registered names."""
        return sorted(self._templates)

    def __contains__(self, name: object) -> bool:
        return name in self._templates

    def __len__(self) -> int:
        return len(self._templates)

    def __iter__(self) -> Iterator[str]:
        return iter(self._templates)

    @classmethod
    def from_directory(
        cls,
        config: EngineConfiguration,
        functions: Optional[Mapping[str, Callable[..., Any]]] = None,
    ) -> "TemplateRegistry":
        """
        Walk ``config.template_dir`` and compile every recognized file.

        Raises:
            NoTemplateDirectoryError: Directory not provided or missing
            TemplateParsingError: A template failed to compile
            NoTemplatesParsedError: Nothing was registered
        """
        error_context = ErrorContext(component="registry", operation="from_directory")

        root = config.template_dir
        if root is None or str(root) == "":
            raise NoTemplateDirectoryError("no template directory provided", context=error_context)
        root = Path(root)
        if not root.is_dir():
            raise NoTemplateDirectoryError(
                f"template directory does not exist: {root}",
                context=error_context,
            )

        sources: Dict[str, str] = {}
        try:
            for template in walk_templates(root, config.extensions):
                if template.name in sources:
                    logger.debug(f"Template {template.name} registered twice, keeping {template.path}")
                sources[template.name] = template.source
        except (OSError, UnicodeDecodeError) as e:
            raise TemplateParsingError(f"template parsing failed: {e}", context=error_context) from e

        if not sources:
            raise NoTemplatesParsedError(f"no templates parsed in {root}", context=error_context)

        env = create_environment(sources, config, functions)

        compiled: Dict[str, CompiledTemplate] = {}
        for name in sources:
            try:
                compiled[name] = JinjaTemplate(name, env.get_template(name))
            except TemplateSyntaxError as e:
                raise TemplateParsingError(
                    f"template parsing failed: {name}: {e}",
                    template=name,
                    context=error_context,
                ) from e

        logger.info(f"Initialized template registry with {len(compiled)} templates from {root}")
        return cls(compiled)

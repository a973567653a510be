"""
Layout chains: ordered layout templates that successively wrap rendered content.
"""
import logging
import threading
from dataclasses import dataclass
from typing import Dict, Iterator, List, Sequence, Tuple

from ..error.exceptions import ErrorContext, LayoutNotFoundError
from .compiled import CompiledTemplate
from .registry import TemplateRegistry

logger = logging.getLogger(__name__)

CHAIN_KEY_SEPARATOR = ":"


@dataclass(frozen=True)
class LayoutChain:
    """Resolved layouts in wrap order. Read-only and shareable across renders."""

    names: Tuple[str, ...] = ()
    templates: Tuple[CompiledTemplate, ...] = ()

    def __iter__(self) -> Iterator[CompiledTemplate]:
        return iter(self.templates)

    def __len__(self) -> int:
        return len(self.templates)


EMPTY_CHAIN = LayoutChain()


def chain_key(layout_names: Sequence[str]) -> str:
    """Order-sensitive cache key for a layout sequence."""
    return CHAIN_KEY_SEPARATOR.join(layout_names)


class LayoutChainResolver:
    """
    Resolves layout names into chains and caches them by layout sequence.

    The cache is append-only: the set of layout combinations is bounded by
    calling code, not by user input.
    """

    def __init__(self, registry: TemplateRegistry, cache_enabled: bool = True):
        self._registry = registry
        self._cache_enabled = cache_enabled
        self._cache: Dict[str, LayoutChain] = {}
        self._lock = threading.Lock()

    def resolve(self, layout_names: Sequence[str]) -> LayoutChain:
        """
        Resolve ``layout_names`` into a chain.

        Raises:
            LayoutNotFoundError: A layout is not registered. Nothing is cached.
        """
        if not layout_names:
            return EMPTY_CHAIN

        key = chain_key(layout_names)
        if self._cache_enabled:
            cached = self._cache.get(key)
            if cached is not None:
                return cached

        templates: List[CompiledTemplate] = []
        for name in layout_names:
            template = self._registry.lookup(name)
            if template is None:
                raise LayoutNotFoundError(
                    name,
                    context=ErrorContext(component="layouts", operation="resolve"),
                )
            templates.append(template)

        chain = LayoutChain(names=tuple(layout_names), templates=tuple(templates))

        if self._cache_enabled:
            # Concurrent builders produce equivalent chains; last store wins.
            with self._lock:
                self._cache[key] = chain
            logger.debug(f"Cached layout chain {key}")

        return chain

    def precompile(self, layout_names: Sequence[str]) -> List[str]:
        """
        Warm the cache for commonly used layouts.

        Each known layout is cached on its own, and the whole sequence is
        cached when every layout in it is known. Unknown names are skipped.

        Returns:
            Names that were resolved
        """
        resolved = []
        for name in layout_names:
            if name not in self._registry:
                logger.warning(f"Common layout not found, skipping: {name}")
                continue
            self.resolve([name])
            resolved.append(name)

        if len(layout_names) > 1 and len(resolved) == len(layout_names):
            self.resolve(layout_names)

        return resolved

    def __len__(self) -> int:
        return len(self._cache)

"""
Template registry, layout chains and render caching.
"""

from .compiled import CompiledTemplate, JinjaTemplate
from .registry import TemplateRegistry
from .layout import LayoutChain, LayoutChainResolver
from .cache import RenderCache, build_cache_key
from .buffers import BufferPool

__all__ = [
    'CompiledTemplate',
    'JinjaTemplate',
    'TemplateRegistry',
    'LayoutChain',
    'LayoutChainResolver',
    'RenderCache',
    'build_cache_key',
    'BufferPool',
]

"""
Template registry package.
"""
from .template_registry import TemplateRegistry

__all__ = ['TemplateRegistry']

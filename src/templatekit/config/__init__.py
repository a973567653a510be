"""
Configuration components for the template engine.
"""
from .configuration import (
    EngineConfiguration,
    ensure_engine_config,
    merge_configs,
    load_config_file,
)

__all__ = [
    "EngineConfiguration",
    "ensure_engine_config",
    "merge_configs",
    "load_config_file",
]

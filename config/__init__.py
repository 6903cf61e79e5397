"""
Configuration module for graphinspect.

This module provides configuration management including
loading settings from YAML files and environment variables.

Example:
    >>> from config import Settings, load_config
    >>>
    >>> # Load default config
    >>> settings = load_config()
    >>>
    >>> # Access settings
    >>> print(settings.sample_config.max_neighbors)
    >>> print(settings.sanity_config.max_reasonable_degree)
"""

from .settings import (
    Settings,
    SampleConfig,
    SanityConfig,
    LayoutConfig,
    load_config,
    get_default_config_path,
)

__all__ = [
    "Settings",
    "SampleConfig",
    "SanityConfig",
    "LayoutConfig",
    "load_config",
    "get_default_config_path",
]

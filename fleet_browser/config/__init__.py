"""
Config package for fleet_browser.

Responsible for:
- config models (GlobalConfig, CollectionConfig)
- config I/O helpers (load_global_config)
"""

from .model import CollectionConfig, GlobalConfig
from .io import load_global_config

__all__ = ["CollectionConfig", "GlobalConfig", "load_global_config"]

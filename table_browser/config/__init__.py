"""
Config package for table_browser.

Responsible for:
- config models (GlobalConfig, TableConfig)
- loading the config directory and picking the data provider
"""

from .model import GlobalConfig, TableConfig
from .loader import build_provider, default_config_root, load_global_config

__all__ = [
    "GlobalConfig",
    "TableConfig",
    "build_provider",
    "default_config_root",
    "load_global_config",
]

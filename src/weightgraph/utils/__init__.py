"""
Utilities submodule for WeightGraph.

Provides configuration management, preference persistence, logging setup and timer helpers.
"""

from .config import ConfigManager, ConfigError
from .helpers import setup_logging, get_app_data_path, format_weight
from .preferences import PreferenceStore

__all__ = ["ConfigManager", "ConfigError", "setup_logging", "get_app_data_path", "format_weight", "PreferenceStore"]

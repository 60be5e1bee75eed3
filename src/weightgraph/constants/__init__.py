"""
Provides centralized, immutable constants for the WeightGraph application.

This package exposes singleton instances of constant groups, ensuring they
are validated on import and easily accessible from a single namespace.

Usage:
    from weightgraph import constants

    # Access application metadata
    print(constants.app.VERSION)

    # Access a pipeline policy default
    window_cap = constants.pipeline.MAX_WINDOW_POINTS

    # Access the default configuration dictionary
    defaults = constants.config.defaults.DEFAULT_CONFIG
"""

from .app import app
from .chart import chart
from .config import config
from .logs import logs
from .pipeline import pipeline
from .timers import timers

__all__ = [
    "app",
    "chart",
    "config",
    "logs",
    "pipeline",
    "timers",
]

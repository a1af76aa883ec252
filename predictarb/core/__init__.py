"""
Core module - Engineering foundation

Contains configuration, logging, HTTP client, caching, and utilities.
"""

from predictarb.core.config import (
    AnalyzerConfig,
    Settings,
    get_settings,
    load_analyzer_config,
    load_yaml_config,
)
from predictarb.core.errors import (
    PredictArbError,
    ProviderError,
    ConfigurationError,
    SnapshotFormatError,
    BreakevenDomainError,
)
from predictarb.core.logging import setup_logging, get_logger

__all__ = [
    "AnalyzerConfig",
    "Settings",
    "get_settings",
    "load_analyzer_config",
    "load_yaml_config",
    "PredictArbError",
    "ProviderError",
    "ConfigurationError",
    "SnapshotFormatError",
    "BreakevenDomainError",
    "setup_logging",
    "get_logger",
]

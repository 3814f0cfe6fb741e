"""Configuration module for the Question Bank Curator.

All filter defaults are empty: an unfiltered query matches every question.
"""

from .settings import config, BackendConfig, QueryConfig, ExportConfig, AppConfig, Config
from .constants import (
    # Dimensions
    DIMENSIONS,
    HIERARCHY_DIMENSIONS,
    INDEPENDENT_DIMENSIONS,
    DIMENSION_LABELS,
    # Enumerations
    DIFFICULTIES,
    QUESTION_TYPES,
    FORMATS,
    CORRECT_OPTIONS,
    SOURCE_SUGGESTIONS,
    ENUMERATED_VALUES,
    # Helper functions
    get_dimension_label,
)
from .config_loader import (
    ConfigurationError,
    load_taxonomy_data,
    load_taxonomy_file,
    clear_config_cache,
)

__all__ = [
    # Settings
    "config",
    "BackendConfig",
    "QueryConfig",
    "ExportConfig",
    "AppConfig",
    "Config",
    # Dimensions
    "DIMENSIONS",
    "HIERARCHY_DIMENSIONS",
    "INDEPENDENT_DIMENSIONS",
    "DIMENSION_LABELS",
    # Enumerations
    "DIFFICULTIES",
    "QUESTION_TYPES",
    "FORMATS",
    "CORRECT_OPTIONS",
    "SOURCE_SUGGESTIONS",
    "ENUMERATED_VALUES",
    "get_dimension_label",
    # Loader
    "ConfigurationError",
    "load_taxonomy_data",
    "load_taxonomy_file",
    "clear_config_cache",
]

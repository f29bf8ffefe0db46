"""
Configuration helpers for the portfolio scaffolder.
"""

from .models import (
    DEFAULT_LANGUAGE,
    SUPPORTED_LANGUAGES,
    ConfigError,
    CustomerConfig,
    CustomerSubmission,
    ScaffoldSettings,
    load_settings,
)
from .settings import get_settings, settings_from_env

__all__ = [
    "DEFAULT_LANGUAGE",
    "SUPPORTED_LANGUAGES",
    "ConfigError",
    "CustomerConfig",
    "CustomerSubmission",
    "ScaffoldSettings",
    "load_settings",
    "get_settings",
    "settings_from_env",
]

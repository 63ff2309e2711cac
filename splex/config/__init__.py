"""
Configuration loading for splex.
"""

from splex.config.settings import ConfigurationError, SplexConfig, resolve_config

__all__ = ["ConfigurationError", "SplexConfig", "resolve_config"]

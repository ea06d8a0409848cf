"""
Configuration management for the SBOM analyzer.
"""

from .config_manager import (
    ConfigManager, AppConfig, GitHubConfig, CatalogConfig, ScanningConfig,
    RateLimitConfig, OutputConfig, LoggingConfig, get_config_manager,
    get_config, reset_config_manager
)

__all__ = [
    "ConfigManager",
    "AppConfig",
    "GitHubConfig",
    "CatalogConfig",
    "ScanningConfig",
    "RateLimitConfig",
    "OutputConfig",
    "LoggingConfig",
    "get_config_manager",
    "get_config",
    "reset_config_manager"
]

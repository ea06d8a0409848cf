"""
Configuration management system for the SBOM analyzer.
"""

import os
import yaml
from pathlib import Path
from typing import Dict, Any, Optional, Union
from dataclasses import dataclass, field, asdict
import logging

logger = logging.getLogger(__name__)

VALID_FORMATS = {"cyclonedx", "spdx"}
VALID_TOOLS = {"syft", "owasp"}
VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass
class GitHubConfig:
    """GitHub API configuration."""
    access_token: Optional[str] = None
    api_base_url: str = "https://api.github.com"
    timeout: int = 30


@dataclass
class CatalogConfig:
    """Repository catalog configuration."""
    max_selection: int = 5
    mock_fallback: bool = True


@dataclass
class ScanningConfig:
    """Simulated scan configuration."""
    tools: list = field(default_factory=lambda: ["syft", "owasp"])
    pacing_enabled: bool = True
    base_delay: float = 0.5  # seconds
    min_jitter: float = 0.3
    max_jitter: float = 1.0


@dataclass
class RateLimitConfig:
    """Rate limit observation thresholds."""
    low_remaining_threshold: int = 5
    warning_threshold: int = 10
    check_interval: int = 60  # seconds


@dataclass
class OutputConfig:
    """Output configuration for SBOMs and reports."""
    directory: str = "./sbom-output"
    formats: list = field(default_factory=lambda: ["cyclonedx", "spdx"])


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "INFO"
    file: Optional[str] = None
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    max_file_size: int = 10  # MB
    backup_count: int = 5


@dataclass
class AppConfig:
    """Complete application configuration."""
    github: GitHubConfig = field(default_factory=GitHubConfig)
    catalog: CatalogConfig = field(default_factory=CatalogConfig)
    scanning: ScanningConfig = field(default_factory=ScanningConfig)
    rate_limit: RateLimitConfig = field(default_factory=RateLimitConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def to_dict(self, mask_secrets: bool = True) -> Dict[str, Any]:
        """Convert configuration to a plain dictionary."""
        data = asdict(self)
        if mask_secrets and data["github"].get("access_token"):
            data["github"]["access_token"] = "*" * 8
        return data


class ConfigManager:
    """
    Manages application configuration from multiple sources.

    Configuration is loaded in the following order (later sources override earlier):
    1. Default configuration
    2. Configuration file
    3. Environment variables
    """

    def __init__(self, config_file: Optional[Union[str, Path]] = None):
        """
        Initialize configuration manager.

        Args:
            config_file: Path to configuration file
        """
        self.config_file = Path(config_file) if config_file else None
        self._config: Optional[AppConfig] = None
        self._env_var_mapping = self._create_env_var_mapping()
        self._boolean_paths = {"catalog.mock_fallback", "scanning.pacing_enabled"}

    def _create_env_var_mapping(self) -> Dict[str, str]:
        """Create mapping of environment variables to config paths."""
        return {
            # GitHub configuration
            "GITHUB_TOKEN": "github.access_token",
            "GITHUB_API_URL": "github.api_base_url",
            "GITHUB_TIMEOUT": "github.timeout",

            # Catalog configuration
            "SBOM_MAX_SELECTION": "catalog.max_selection",
            "SBOM_MOCK_FALLBACK": "catalog.mock_fallback",

            # Scanning configuration
            "SBOM_TOOLS": "scanning.tools",
            "SBOM_SCAN_PACING": "scanning.pacing_enabled",

            # Rate limit configuration
            "RATE_LIMIT_WARNING_THRESHOLD": "rate_limit.warning_threshold",
            "RATE_LIMIT_CHECK_INTERVAL": "rate_limit.check_interval",

            # Output configuration
            "SBOM_OUTPUT_DIR": "output.directory",
            "SBOM_FORMATS": "output.formats",

            # Logging configuration
            "LOG_LEVEL": "logging.level",
            "LOG_FILE": "logging.file",
            "LOG_FORMAT": "logging.format",
            "LOG_MAX_SIZE": "logging.max_file_size",
            "LOG_BACKUP_COUNT": "logging.backup_count",
        }

    def load_config(self) -> AppConfig:
        """
        Load configuration from all sources.

        Returns:
            Complete application configuration
        """
        if self._config is not None:
            return self._config

        config_dict = self._get_default_config()

        if self.config_file and self.config_file.exists():
            file_config = self._load_config_file(self.config_file)
            config_dict = self._merge_configs(config_dict, file_config)

        env_config = self._load_env_config()
        config_dict = self._merge_configs(config_dict, env_config)

        config_dict = self._substitute_env_vars(config_dict)

        self._validate_config(config_dict)

        self._config = self._dict_to_config(config_dict)

        return self._config

    def _get_default_config(self) -> Dict[str, Any]:
        """Get default configuration values."""
        return AppConfig().to_dict(mask_secrets=False)

    def _load_config_file(self, config_path: Path) -> Dict[str, Any]:
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to configuration file

        Returns:
            Configuration dictionary
        """
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                config = yaml.safe_load(f)
                logger.info(f"Loaded configuration from {config_path}")
                return config or {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Failed to load config file {config_path}: {e}")
            return {}

    def _load_env_config(self) -> Dict[str, Any]:
        """
        Load configuration from environment variables.

        Returns:
            Configuration dictionary from environment variables
        """
        env_config = {}

        for env_var, config_path in self._env_var_mapping.items():
            value = os.getenv(env_var)
            if value is not None:
                value = self._convert_env_value(value, config_path)
                self._set_nested_value(env_config, config_path, value)

        return env_config

    def _convert_env_value(self, value: str, config_path: str) -> Any:
        """
        Convert environment variable string to appropriate type.

        Args:
            value: String value from environment variable
            config_path: Dotted config path the value is destined for

        Returns:
            Converted value
        """
        # Tokens and free-form strings are never coerced
        if config_path in ("github.access_token", "logging.format", "logging.file"):
            return value

        if config_path in ("scanning.tools", "output.formats"):
            return [item.strip() for item in value.split(',') if item.strip()]

        if config_path in self._boolean_paths:
            if value.lower() in ('true', 'yes', '1', 'on'):
                return True
            elif value.lower() in ('false', 'no', '0', 'off'):
                return False

        try:
            if '.' in value:
                return float(value)
            else:
                return int(value)
        except ValueError:
            pass

        return value

    def _set_nested_value(self, config: Dict[str, Any], path: str, value: Any) -> None:
        """
        Set a nested configuration value using dot notation.

        Args:
            config: Configuration dictionary
            path: Dot-separated path (e.g., 'github.access_token')
            value: Value to set
        """
        keys = path.split('.')
        current = config

        for key in keys[:-1]:
            if key not in current:
                current[key] = {}
            current = current[key]

        current[keys[-1]] = value

    def _substitute_env_vars(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """
        Substitute ${VAR} references in configuration values.

        Args:
            config: Configuration dictionary

        Returns:
            Configuration with environment variables substituted
        """
        def substitute_recursive(obj):
            if isinstance(obj, dict):
                return {k: substitute_recursive(v) for k, v in obj.items()}
            elif isinstance(obj, list):
                return [substitute_recursive(item) for item in obj]
            elif isinstance(obj, str) and obj.startswith('${') and obj.endswith('}'):
                env_var = obj[2:-1]
                return os.getenv(env_var, obj)
            else:
                return obj

        return substitute_recursive(config)

    def _merge_configs(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """
        Merge two configuration dictionaries.

        Args:
            base: Base configuration
            override: Override configuration

        Returns:
            Merged configuration
        """
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge_configs(result[key], value)
            else:
                result[key] = value

        return result

    def _validate_config(self, config: Dict[str, Any]) -> None:
        """
        Validate configuration values.

        Args:
            config: Configuration dictionary

        Raises:
            ValueError: If configuration is invalid
        """
        if not config.get("github", {}).get("access_token"):
            logger.info("GitHub access token not configured - unauthenticated rate limits apply")

        for fmt in config.get("output", {}).get("formats", []):
            if fmt not in VALID_FORMATS:
                raise ValueError(f"Invalid output format: {fmt}. Valid formats: {VALID_FORMATS}")

        for tool in config.get("scanning", {}).get("tools", []):
            if tool not in VALID_TOOLS:
                raise ValueError(f"Invalid scanner tool: {tool}. Valid tools: {VALID_TOOLS}")

        log_level = str(config.get("logging", {}).get("level", "INFO")).upper()
        if log_level not in VALID_LOG_LEVELS:
            raise ValueError(f"Invalid log level: {log_level}. Valid levels: {VALID_LOG_LEVELS}")

        max_selection = config.get("catalog", {}).get("max_selection", 5)
        if not isinstance(max_selection, int) or max_selection < 1:
            raise ValueError(f"Invalid max_selection: {max_selection}. Must be a positive integer")

        scanning = config.get("scanning", {})
        if scanning.get("min_jitter", 0) > scanning.get("max_jitter", 0):
            raise ValueError("scanning.min_jitter must not exceed scanning.max_jitter")

    def _dict_to_config(self, config_dict: Dict[str, Any]) -> AppConfig:
        """
        Convert configuration dictionary to AppConfig object.

        Args:
            config_dict: Configuration dictionary

        Returns:
            AppConfig object
        """
        return AppConfig(
            github=GitHubConfig(**config_dict.get("github", {})),
            catalog=CatalogConfig(**config_dict.get("catalog", {})),
            scanning=ScanningConfig(**config_dict.get("scanning", {})),
            rate_limit=RateLimitConfig(**config_dict.get("rate_limit", {})),
            output=OutputConfig(**config_dict.get("output", {})),
            logging=LoggingConfig(**config_dict.get("logging", {}))
        )

    def get_config(self) -> AppConfig:
        """
        Get the current configuration.

        Returns:
            Application configuration
        """
        if self._config is None:
            return self.load_config()
        return self._config

    def reload_config(self) -> AppConfig:
        """
        Reload configuration from all sources.

        Returns:
            Reloaded application configuration
        """
        self._config = None
        return self.load_config()

    def save_config(self, config_path: Optional[Path] = None) -> None:
        """
        Save current configuration to file. The access token is never written.

        Args:
            config_path: Path to save configuration file
        """
        if config_path is None:
            config_path = self.config_file or Path("config.yaml")

        config_dict = self.get_config().to_dict(mask_secrets=False)
        config_dict["github"].pop("access_token", None)

        with open(config_path, 'w', encoding='utf-8') as f:
            yaml.dump(config_dict, f, default_flow_style=False, indent=2)

        logger.info(f"Configuration saved to {config_path}")


# Global configuration manager instance
_config_manager: Optional[ConfigManager] = None


def get_config_manager(config_file: Optional[Union[str, Path]] = None) -> ConfigManager:
    """
    Get the global configuration manager instance.

    Args:
        config_file: Path to configuration file (only used on first call)

    Returns:
        ConfigManager instance
    """
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager(config_file)
    return _config_manager


def get_config() -> AppConfig:
    """
    Get the current application configuration.

    Returns:
        Application configuration
    """
    return get_config_manager().get_config()


def reset_config_manager() -> None:
    """Drop the global configuration manager so the next call reloads it."""
    global _config_manager
    _config_manager = None

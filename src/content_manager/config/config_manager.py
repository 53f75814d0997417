"""
Configuration management for the content manager.
"""

import os
import yaml
from pathlib import Path
from typing import Dict, Any, Optional, Union
from dataclasses import dataclass, field, asdict
import logging

from .. import __version__
from ..error_handling import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass
class GitHubConfig:
    """GitHub API and target repository configuration."""
    access_token: Optional[str] = None
    owner: str = "leeasling-gradial"
    repo: str = "grady-challenge"
    api_base_url: str = "https://api.github.com"
    timeout: int = 30
    default_branch: str = "main"
    user_agent: str = f"content-manager/{__version__}"


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "WARNING"
    file: Optional[str] = None
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    max_file_size: int = 10  # MB
    backup_count: int = 5
    structured: bool = False


@dataclass
class AppConfig:
    """Complete application configuration."""
    github: GitHubConfig = field(default_factory=GitHubConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def require_token(self) -> str:
        """
        Return the GitHub token or fail.

        Raises:
            ConfigurationError: If no token is configured
        """
        if not self.github.access_token:
            raise ConfigurationError(
                "GITHUB_TOKEN environment variable is required",
                setting="github.access_token"
            )
        return self.github.access_token

    def to_dict(self, mask_secrets: bool = True) -> Dict[str, Any]:
        """Convert configuration to a plain dictionary."""
        data = asdict(self)
        if mask_secrets and data["github"].get("access_token"):
            data["github"]["access_token"] = "*" * 8
        return data


class ConfigManager:
    """
    Builds the application configuration from multiple sources.

    Configuration is loaded in the following order (later sources override earlier):
    1. Default configuration
    2. Configuration file (YAML)
    3. Environment variables

    The CLI creates one manager per process and hands the resulting
    ``AppConfig`` to the components that need it.
    """

    # env var -> (config path, type)
    ENV_VAR_MAPPING = {
        "GITHUB_TOKEN": ("github.access_token", str),
        "GITHUB_OWNER": ("github.owner", str),
        "GITHUB_REPO": ("github.repo", str),
        "GITHUB_API_URL": ("github.api_base_url", str),
        "GITHUB_TIMEOUT": ("github.timeout", int),
        "GITHUB_BRANCH": ("github.default_branch", str),

        "LOG_LEVEL": ("logging.level", str),
        "LOG_FILE": ("logging.file", str),
        "LOG_FORMAT": ("logging.format", str),
        "LOG_MAX_SIZE": ("logging.max_file_size", int),
        "LOG_BACKUP_COUNT": ("logging.backup_count", int),
        "LOG_STRUCTURED": ("logging.structured", bool),
    }

    def __init__(
        self,
        config_file: Optional[Union[str, Path]] = None,
        environ: Optional[Dict[str, str]] = None
    ):
        """
        Initialize configuration manager.

        Args:
            config_file: Path to configuration file
            environ: Environment mapping (defaults to ``os.environ``)
        """
        self.config_file = Path(config_file) if config_file else None
        self.environ = os.environ if environ is None else environ
        self._config: Optional[AppConfig] = None

    def load_config(self) -> AppConfig:
        """
        Load configuration from all sources.

        Returns:
            Complete application configuration

        Raises:
            ConfigurationError: If the merged configuration is invalid
        """
        if self._config is not None:
            return self._config

        config_dict = self._get_default_config()

        if self.config_file:
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

        Raises:
            ConfigurationError: If the file cannot be read or parsed
        """
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                config = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(
                f"Failed to load config file {config_path}: {e}", cause=e
            ) from e

        if config is None:
            return {}
        if not isinstance(config, dict):
            raise ConfigurationError(f"Config file {config_path} must contain a mapping")

        # An empty section ("github:" alone) loads as None
        config = {section: values for section, values in config.items() if values is not None}
        for section, values in config.items():
            if not isinstance(values, dict):
                raise ConfigurationError(
                    f"Section '{section}' in config file {config_path} must be a mapping",
                    setting=str(section)
                )

        logger.info(f"Loaded configuration from {config_path}")
        return config

    def _load_env_config(self) -> Dict[str, Any]:
        """
        Load configuration from environment variables.

        Returns:
            Configuration dictionary from environment variables
        """
        env_config: Dict[str, Any] = {}

        for env_var, (config_path, value_type) in self.ENV_VAR_MAPPING.items():
            value = self.environ.get(env_var)
            if value is None or value == "":
                continue
            self._set_nested_value(
                env_config, config_path, self._convert_env_value(env_var, value, value_type)
            )

        return env_config

    def _convert_env_value(self, name: str, value: str, value_type: type) -> Any:
        """
        Convert environment variable string to the setting's type.

        Raises:
            ConfigurationError: If the value cannot be converted
        """
        if value_type is bool:
            if value.lower() in ('true', 'yes', '1', 'on'):
                return True
            if value.lower() in ('false', 'no', '0', 'off'):
                return False
            raise ConfigurationError(f"Invalid boolean for {name}: {value}", setting=name)

        if value_type is int:
            try:
                return int(value)
            except ValueError as e:
                raise ConfigurationError(
                    f"Invalid integer for {name}: {value}", setting=name, cause=e
                ) from e

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
        """Replace ``${VAR}`` string values with the variable's value."""
        def substitute_recursive(obj):
            if isinstance(obj, dict):
                return {k: substitute_recursive(v) for k, v in obj.items()}
            elif isinstance(obj, list):
                return [substitute_recursive(item) for item in obj]
            elif isinstance(obj, str) and obj.startswith('${') and obj.endswith('}'):
                env_var = obj[2:-1]
                return self.environ.get(env_var, obj)
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

        Raises:
            ConfigurationError: If configuration is invalid
        """
        github = config.get("github", {})

        unknown = set(github) - set(GitHubConfig.__dataclass_fields__)
        unknown |= set(config.get("logging", {})) - set(LoggingConfig.__dataclass_fields__)
        if unknown:
            raise ConfigurationError(f"Unknown configuration keys: {', '.join(sorted(unknown))}")

        if not github.get("owner") or not github.get("repo"):
            raise ConfigurationError("Repository owner and name must both be set", setting="github")

        timeout = github.get("timeout")
        if not isinstance(timeout, int) or timeout <= 0:
            raise ConfigurationError(f"Invalid timeout: {timeout}", setting="github.timeout")

        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        log_level = str(config.get("logging", {}).get("level", "WARNING")).upper()
        if log_level not in valid_levels:
            raise ConfigurationError(
                f"Invalid log level: {log_level}. Valid levels: {sorted(valid_levels)}",
                setting="logging.level"
            )
        config["logging"]["level"] = log_level

        if not github.get("access_token"):
            logger.debug("GitHub access token not configured")

    def _dict_to_config(self, config_dict: Dict[str, Any]) -> AppConfig:
        """Convert configuration dictionary to AppConfig object."""
        return AppConfig(
            github=GitHubConfig(**config_dict.get("github", {})),
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

    def save_config(self, config_path: Optional[Path] = None) -> Path:
        """
        Save current configuration to a YAML file. The token is never written.

        Args:
            config_path: Path to save configuration file

        Returns:
            Path the configuration was written to
        """
        if config_path is None:
            config_path = self.config_file or Path("content-manager.yaml")

        config_dict = self.get_config().to_dict(mask_secrets=False)
        config_dict["github"].pop("access_token", None)

        with open(config_path, 'w', encoding='utf-8') as f:
            yaml.safe_dump(config_dict, f, default_flow_style=False, indent=2)

        logger.info(f"Configuration saved to {config_path}")
        return Path(config_path)

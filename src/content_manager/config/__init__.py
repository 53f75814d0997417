"""
Configuration management for the content manager.
"""

from .config_manager import ConfigManager, AppConfig, GitHubConfig, LoggingConfig

__all__ = [
    "ConfigManager",
    "AppConfig",
    "GitHubConfig",
    "LoggingConfig"
]

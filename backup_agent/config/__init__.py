"""Configuration management for the backup agent."""

from .config_manager import ConfigManager
from .config_validator import ConfigValidator

__all__ = ["ConfigManager", "ConfigValidator"]

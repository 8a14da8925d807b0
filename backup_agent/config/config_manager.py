"""Configuration management for the backup agent."""

import os
import yaml
from typing import Dict, List, Any, Optional
from .config_validator import ConfigValidator
from ..core.models import BackupJob, Compression, GlobalSettings


DEFAULT_CONFIG = {
    'settings': {
        'interval': 300,
        'filename': '%name%-%timestamp%',
        'compression': 'zip',
    },
    'backup': {
        'path1': {'from': '/a/path', 'dest': './'},
        'path2': {'from': '/another/path', 'dest': './'},
    },
}


class ConfigManager:
    """Manages configuration loading and validation for the backup agent."""
    
    DEFAULT_CONFIG_LOCATIONS = [
        "/etc/backup-agent.yaml",
        os.path.expanduser("~/.config/backup-agent.yaml"),
        "backup-agent.yaml",
    ]
    DEFAULT_CONFIG_NAME = "backup-agent.yaml"
    
    def __init__(self, config_path: Optional[str] = None):
        """Initialize configuration manager.
        
        Args:
            config_path: Optional path to config file. If not provided,
                        will search in default locations.
        """
        self.config_path = config_path
        self.config_file: Optional[str] = None
        self.config_data: Dict[str, Any] = {}
        self.validator = ConfigValidator()
        
    def load_config(self) -> Dict[str, Any]:
        """Load configuration from file.
        
        Returns:
            Dictionary containing configuration data.
            
        Raises:
            FileNotFoundError: If config file cannot be found.
            ValueError: If config file is invalid.
        """
        self.config_file = self._find_config_file()
        
        try:
            with open(self.config_file, 'r', encoding='utf-8') as f:
                self.config_data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in config file {self.config_file}: {e}")
        except OSError as e:
            raise ValueError(f"Error reading config file {self.config_file}: {e}")
        
        self.validator.validate(self.config_data)
        
        self._set_defaults()
        
        return self.config_data
    
    def search_paths(self) -> List[str]:
        """Locations checked for a configuration file, in order.
        
        An explicit path replaces the default search path entirely.
        """
        if self.config_path:
            return [self.config_path]
        return list(self.DEFAULT_CONFIG_LOCATIONS)
    
    def _find_config_file(self) -> str:
        """Return the first existing file of the search path.
        
        Raises:
            FileNotFoundError: If none exists.
        """
        candidates = self.search_paths()
        found = next((path for path in candidates if os.path.isfile(path)), None)
        if found:
            return found
        
        if self.config_path:
            raise FileNotFoundError(f"Config file not found: {self.config_path}")
        raise FileNotFoundError(
            "Configuration file not found in any of these locations:\n"
            + "\n".join(f"  - {path}" for path in candidates)
            + "\n\nRun 'backup-agent init' to create one."
        )
    
    def _set_defaults(self):
        """Set default values for optional settings."""
        settings = self.config_data['settings']
        settings.setdefault('filename', DEFAULT_CONFIG['settings']['filename'])
        settings.setdefault('compression', DEFAULT_CONFIG['settings']['compression'])
        settings.setdefault('follow_symlinks', False)
    
    def get_settings(self) -> GlobalSettings:
        """Get global settings.
        
        Returns:
            GlobalSettings built from the settings section.
        """
        settings = self.config_data.get('settings', {})
        return GlobalSettings(
            interval=int(settings['interval']),
            filename_template=settings.get('filename', DEFAULT_CONFIG['settings']['filename']),
            compression=Compression(settings.get('compression', 'zip')),
            follow_symlinks=bool(settings.get('follow_symlinks', False)),
        )
    
    def get_jobs(self) -> List[BackupJob]:
        """Get all configured backup jobs in document order."""
        return [
            BackupJob(name=str(name), source=job['from'], destination=job['dest'])
            for name, job in self.config_data.get('backup', {}).items()
        ]
    
    @staticmethod
    def write_default_config(path: Optional[str] = None) -> str:
        """Write a starter configuration file.
        
        Args:
            path: Where to write it. Defaults to ``backup-agent.yaml`` in the
                current directory.
            
        Returns:
            The path written.
            
        Raises:
            FileExistsError: If the file already exists.
        """
        path = path or ConfigManager.DEFAULT_CONFIG_NAME
        if os.path.exists(path):
            raise FileExistsError(f"Config file already exists: {path}")
        
        with open(path, 'w', encoding='utf-8') as f:
            yaml.safe_dump(DEFAULT_CONFIG, f, sort_keys=False, default_flow_style=False)
        return path

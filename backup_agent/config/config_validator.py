"""Configuration validation for the backup agent."""

from typing import Dict, Any

from ..utils.formatters import is_plain_filename


class ConfigValidator:
    """Validates backup agent configuration."""
    
    REQUIRED_SECTIONS = ['settings', 'backup']
    REQUIRED_JOB_FIELDS = ['from', 'dest']
    COMPRESSION_CHOICES = ['zip', 'zstd']
    
    def validate(self, config: Dict[str, Any]) -> None:
        """Validate configuration data.
        
        Args:
            config: Configuration dictionary to validate.
            
        Raises:
            ValueError: If configuration is invalid.
        """
        if not isinstance(config, dict):
            raise ValueError("Configuration must be a mapping")
        self._validate_structure(config)
        self._validate_settings(config['settings'])
        self._validate_jobs(config['backup'])
    
    def _validate_structure(self, config: Dict[str, Any]) -> None:
        """Validate basic configuration structure.
        
        Args:
            config: Configuration dictionary.
            
        Raises:
            ValueError: If required sections are missing.
        """
        missing_sections = []
        for section in self.REQUIRED_SECTIONS:
            if section not in config:
                missing_sections.append(section)
        
        if missing_sections:
            raise ValueError(f"Missing required configuration sections: {missing_sections}")
    
    def _validate_settings(self, settings: Dict[str, Any]) -> None:
        """Validate the global settings section.
        
        Raises:
            ValueError: If a setting is missing or invalid.
        """
        if not isinstance(settings, dict):
            raise ValueError("settings must be a dictionary")
        
        if 'interval' not in settings:
            raise ValueError("settings missing required field: interval")
        interval = settings['interval']
        if isinstance(interval, bool) or not isinstance(interval, int) or interval <= 0:
            raise ValueError(f"settings has invalid interval: {interval}")
        
        filename = settings.get('filename', '%name%-%timestamp%')
        if not isinstance(filename, str) or not filename:
            raise ValueError("settings filename template cannot be empty")
        if not is_plain_filename(filename):
            raise ValueError(f"settings filename template must be a plain file name: {filename}")
        
        compression = settings.get('compression', 'zip')
        if compression not in self.COMPRESSION_CHOICES:
            raise ValueError(
                f"settings has invalid compression: {compression} "
                f"(expected one of {self.COMPRESSION_CHOICES})"
            )
        
        follow_symlinks = settings.get('follow_symlinks', False)
        if not isinstance(follow_symlinks, bool):
            raise ValueError(f"settings follow_symlinks must be true or false: {follow_symlinks}")
    
    def _validate_jobs(self, jobs: Dict[str, Any]) -> None:
        """Validate backup job configuration.
        
        Args:
            jobs: Mapping of job name to job configuration.
            
        Raises:
            ValueError: If backup jobs are invalid.
        """
        if not isinstance(jobs, dict):
            raise ValueError("backup must be a mapping of job names to jobs")
        if not jobs:
            raise ValueError("At least one backup job must be configured")
        
        for name, job in jobs.items():
            if not isinstance(job, dict):
                raise ValueError(f"Backup job {name} must be a dictionary")
            
            if not is_plain_filename(str(name)):
                raise ValueError(
                    f"Backup job name {name!r} must be a plain file name "
                    f"(not empty, no path separators, not . or ..)"
                )
            
            missing_fields = [field for field in self.REQUIRED_JOB_FIELDS if field not in job]
            if missing_fields:
                raise ValueError(f"Backup job {name} missing required fields: {missing_fields}")
            
            for field in self.REQUIRED_JOB_FIELDS:
                if not isinstance(job[field], str) or not job[field]:
                    raise ValueError(f"Backup job {name} {field} cannot be empty")

"""Main backup agent class."""

import logging
from typing import List, Optional

from .models import JobResult
from .scheduler import Scheduler
from ..config.config_manager import ConfigManager


class BackupAgent:
    """Wires the loaded configuration into a scheduler."""
    
    def __init__(self, config_path: Optional[str] = None, verbose: bool = False):
        """Initialize backup agent.
        
        Args:
            config_path: Optional path to configuration file.
            verbose: List changed files before each backup.
        """
        self.config_manager = ConfigManager(config_path)
        self.config = self.config_manager.load_config()
        self.jobs = self.config_manager.get_jobs()
        self.settings = self.config_manager.get_settings()
        self.logger = logging.getLogger(__name__)
        self.scheduler = Scheduler(self.jobs, self.settings, verbose=verbose)
    
    def run(self, max_ticks: Optional[int] = None):
        """Watch all jobs until interrupted."""
        self.logger.info(f"Loaded configuration from {self.config_manager.config_file}")
        self.scheduler.run_forever(max_ticks=max_ticks)
    
    def run_once(self) -> List[JobResult]:
        """Run a single cycle over every job immediately."""
        self.scheduler.state, results = self.scheduler.run_cycle(self.scheduler.state)
        return results

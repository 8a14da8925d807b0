"""Command-line interface for the backup agent."""

import logging
import sys
import click
from typing import Optional

from .core.agent import BackupAgent
from .core.models import JobStatus
from .config.config_manager import ConfigManager


LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(level: str, log_file: Optional[str] = None):
    """Send agent notices to stdout and, optionally, a log file."""
    numeric_level = getattr(logging, level.upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f'Invalid log level: {level}')
    
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        try:
            handlers.append(logging.FileHandler(log_file))
        except OSError as e:
            click.echo(f"Warning: Could not set up file logging: {e}", err=True)
    
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    
    formatter = logging.Formatter(LOG_FORMAT)
    for handler in handlers:
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)
    root_logger.setLevel(numeric_level)


@click.group()
@click.option('--config', '-c', 'config_path',
              help='Path to configuration file')
@click.option('--log-level', default='INFO',
              type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR'], case_sensitive=False),
              help='Logging level')
@click.option('--log-file',
              help='Log file path')
@click.pass_context
def cli(ctx, config_path: Optional[str], log_level: str, log_file: Optional[str]):
    """Backup Agent - back up directories whenever their files change."""
    ctx.ensure_object(dict)
    
    setup_logging(log_level, log_file)
    
    ctx.obj['config_path'] = config_path


@cli.command()
@click.option('--verbose', '-v', is_flag=True, help='List changed files before each backup')
@click.pass_context
def run(ctx, verbose: bool):
    """Watch all configured directories until interrupted."""
    try:
        agent = BackupAgent(ctx.obj.get('config_path'), verbose=verbose)
    except (FileNotFoundError, ValueError) as e:
        click.echo(f"Failed to load configuration: {e}", err=True)
        sys.exit(1)
    
    try:
        agent.run()
    except KeyboardInterrupt:
        click.echo("\nStopped.")


@cli.command()
@click.option('--verbose', '-v', is_flag=True, help='List changed files before each backup')
@click.pass_context
def once(ctx, verbose: bool):
    """Run a single backup cycle now and exit."""
    try:
        agent = BackupAgent(ctx.obj.get('config_path'), verbose=verbose)
    except (FileNotFoundError, ValueError) as e:
        click.echo(f"Failed to load configuration: {e}", err=True)
        sys.exit(1)
    
    results = agent.run_once()
    
    click.echo("\nCycle Results:")
    click.echo("=" * 50)
    for result in results:
        line = f"  {result.job_name}: {result.status.value}"
        if result.archive_path:
            line += f" -> {result.archive_path}"
        if result.error_message:
            line += f" ({result.error_message})"
        click.echo(line)
    
    if any(result.status is JobStatus.FAILED for result in results):
        sys.exit(1)


@cli.command()
@click.option('--path', '-p', 'path', default=None,
              help='Where to write the configuration file')
def init(path: Optional[str]):
    """Write a default configuration file."""
    try:
        written = ConfigManager.write_default_config(path)
    except (FileExistsError, OSError) as e:
        click.echo(f"Failed to initialize configuration: {e}", err=True)
        sys.exit(1)
    
    click.echo(f"✅ Configuration written to {written}")


@cli.command()
@click.pass_context
def validate_config(ctx):
    """Validate configuration file."""
    try:
        config_manager = ConfigManager(ctx.obj.get('config_path'))
        config_manager.load_config()
    except (FileNotFoundError, ValueError) as e:
        click.echo(f"❌ Configuration validation failed: {e}", err=True)
        sys.exit(1)
    
    click.echo(f"✅ Configuration loaded successfully from {config_manager.config_file}")
    
    settings = config_manager.get_settings()
    jobs = config_manager.get_jobs()
    
    click.echo(f"\n📊 Configuration Summary:")
    click.echo(f"   Interval: {settings.interval}s")
    click.echo(f"   Filename template: {settings.filename_template}")
    click.echo(f"   Compression: {settings.compression.value}")
    click.echo(f"   Backup jobs: {len(jobs)}")
    
    for i, job in enumerate(jobs, 1):
        click.echo(f"     {i}. {job.name}: {job.source} -> {job.destination}")


def main():
    """Main CLI entry point."""
    cli()


if __name__ == '__main__':
    main()

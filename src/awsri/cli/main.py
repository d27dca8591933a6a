import click
import logging
from pathlib import Path
from rich.console import Console

from .. import __version__
from ..core.config import get_settings, reload_settings
from ..core.logging import setup_logging
from .commands import elasticache, generate, rds, savings_plans, total
from .common import handle_errors

console = Console()

logger = logging.getLogger(__name__)


@click.group()
@click.version_option(version=__version__, prog_name='awsri')
@click.option('--debug', is_flag=True, help='Enable debug logging')
@click.option('--config', type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help='Path to configuration file')
@click.option('--profile', help='AWS profile name')
@click.option('--log-format', type=click.Choice(['text', 'json']), default=None,
              help='Log output format')
@click.pass_context
@handle_errors
def cli(ctx, debug, config, profile, log_format):
    """
    awsri - AWS Reserved Instance and Savings Plan cost calculator

    Compare reservation offerings against on-demand prices and size
    Compute Savings Plans purchases.
    """
    ctx.ensure_object(dict)

    settings = reload_settings(config) if config else get_settings()
    structured = settings.logging.structured if log_format is None else log_format == 'json'
    setup_logging(
        level='DEBUG' if debug or settings.debug else settings.logging.level,
        log_file=settings.logging.file,
        structured=structured,
    )
    logger.debug(f"Using region {settings.aws.region} (pricing region {settings.aws.pricing_region})")

    ctx.obj['settings'] = settings
    ctx.obj['console'] = console
    ctx.obj['profile'] = profile or settings.aws.profile


# Register commands
cli.add_command(rds.rds)
cli.add_command(elasticache.elasticache)
cli.add_command(savings_plans.compute_savings_plans)
cli.add_command(total.total)
cli.add_command(generate.generate)


@cli.command()
def version():
    """Show version information"""
    click.echo(__version__)


if __name__ == '__main__':
    cli()

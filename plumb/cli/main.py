"""Main CLI entry point for Plumb."""

import logging

import click
from colorama import init

from plumb import __version__
from plumb.cli.output import BANNER
from plumb.cli.commands import hash_object_cmd, check_ref_format_cmd, snapshot_cmd
from plumb.core.config import Config

# Initialize colorama for cross-platform colored output
init(autoreset=True)

LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR']


class PlumbGroup(click.Group):
    """Custom Group class to display banner before help."""

    def format_help(self, ctx, formatter):
        """Override to add banner before help text."""
        click.echo(BANNER)
        super().format_help(ctx, formatter)


@click.group(cls=PlumbGroup)
@click.version_option(version=__version__)
@click.option('--config', 'config_path', type=click.Path(dir_okay=False),
              help='Read settings from this config file')
@click.option('--log-level', type=click.Choice(LOG_LEVELS, case_sensitive=False),
              help='Logging level (default: core.loglevel or WARNING)')
@click.pass_context
def cli(ctx, config_path, log_level):
    config = Config(config_path)
    level = (log_level or config.get('core', 'loglevel', 'WARNING')).upper()
    logging.basicConfig(level=getattr(logging, level, logging.WARNING),
                        format='%(levelname)s %(name)s: %(message)s')
    ctx.obj = config


# Register commands
cli.add_command(hash_object_cmd)
cli.add_command(check_ref_format_cmd)
cli.add_command(snapshot_cmd)


def main():
    """Main entry point."""
    cli()


if __name__ == '__main__':
    main()

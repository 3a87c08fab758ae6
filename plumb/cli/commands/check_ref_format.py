"""Check-ref-format command - validate branch and tag names."""

import click

from plumb.core.refs import is_valid_ref_name
from plumb.cli.output import success, error


@click.command('check-ref-format')
@click.option('-q', '--quiet', is_flag=True, help='Only report through the exit status')
@click.argument('name')
def check_ref_format_cmd(quiet, name):
    """
    Check that NAME is a valid branch or tag name.

    Exits with status 0 if valid, 1 otherwise.

    Examples:
        plumb check-ref-format feature-1     # valid
        plumb check-ref-format a/../b        # invalid
    """
    if is_valid_ref_name(name):
        if not quiet:
            click.echo(success(f"Valid ref name: {name}"))
        return

    if not quiet:
        click.echo(error(f"Invalid ref name: {name!r}"))
    raise click.exceptions.Exit(1)

"""Hash-object command - compute object digests for files."""

import click
from pathlib import Path

from plumb.core.hash import OBJECT_KINDS, digest_of
from plumb.cli.output import error


@click.command('hash-object')
@click.option('-t', '--type', 'kind', type=click.Choice(OBJECT_KINDS), default='blob',
              help='Object kind to hash the content as (default: blob)')
@click.argument('files', nargs=-1, required=True, type=click.Path(dir_okay=False))
def hash_object_cmd(kind, files):
    """
    Compute the digest of each FILE as an object of the given kind.

    The content is hashed with its kind and size header, exactly as the
    object store would address it. Nothing is stored.

    Examples:
        plumb hash-object README.md           # Digest as a blob
        plumb hash-object -t tree tree.bin    # Digest raw bytes as a tree
    """
    failed = False

    for name in files:
        path = Path(name)
        if not path.is_file():
            click.echo(error(f"File not found: {name}"), err=True)
            failed = True
            continue
        click.echo(digest_of(kind, path.read_bytes()))

    if failed:
        raise click.exceptions.Exit(1)

"""Snapshot command - load a directory into an in-memory repository and inspect it."""

import click
from pathlib import Path
from colorama import Fore, Style

from plumb.core.refs import is_valid_ref_name
from plumb.core.repository import Repository
from plumb.cli.output import success, error, info, warning, short


def read_directory(directory: Path) -> dict:
    """
    Read a directory into a staging mapping.

    Files become bytes, subdirectories nested dicts. Hidden entries
    (starting with '.') are skipped.
    """
    mapping = {}
    for item in sorted(directory.iterdir()):
        if item.name.startswith('.'):
            continue
        if item.is_file():
            mapping[item.name] = item.read_bytes()
        elif item.is_dir():
            mapping[item.name] = read_directory(item)
    return mapping


def show_refs(repo: Repository) -> None:
    for ref in repo.refs.get_all_refs():
        if ref.is_head:
            click.echo(f"{ref.target or '(unborn)'} {Fore.CYAN}HEAD{Style.RESET_ALL}")
        elif ref.is_branch:
            click.echo(f"{ref.target} {Fore.GREEN}{ref.name}{Style.RESET_ALL}")
        else:
            click.echo(f"{ref.target} {Fore.YELLOW}{ref.name}{Style.RESET_ALL}")


def show_stats(repo: Repository) -> None:
    stats = repo.repository_stats()
    click.echo(f"{Fore.CYAN}Object Statistics:{Style.RESET_ALL}")
    click.echo(f"  Commits:  {Fore.YELLOW}{stats.commit_count}{Style.RESET_ALL}")
    click.echo(f"  Trees:    {Fore.YELLOW}{stats.tree_count}{Style.RESET_ALL}")
    click.echo(f"  Blobs:    {Fore.YELLOW}{stats.blob_count}{Style.RESET_ALL}")
    click.echo(f"  Dangling: {Fore.YELLOW}{stats.dangling_objects}{Style.RESET_ALL}")
    click.echo(f"{stats.total_objects} objects, {stats.total_size / 1024:.2f} KB")


@click.command('snapshot')
@click.argument('directory', type=click.Path(exists=True, file_okay=False))
@click.option('-m', '--message', help='Commit message (default: "Snapshot of <directory>")')
@click.option('-b', '--branch', default='main', show_default=True, help='Branch to point at the commit')
@click.option('-t', '--tag', help='Also tag the commit')
@click.option('-v', '--verbose', is_flag=True, help='Show ref history and object details')
@click.pass_obj
def snapshot_cmd(config, directory, message, branch, tag, verbose):
    """
    Snapshot DIRECTORY into a fresh in-memory repository.

    Stores every file as a blob and every directory as a tree, commits
    the root tree, points the branch and HEAD at the commit, then
    reports refs, object statistics and integrity problems.
    Nothing is written to disk.

    Examples:
        plumb snapshot .                       # Snapshot current directory
        plumb snapshot src -m "Import" -t v1   # Custom message, tagged
        plumb snapshot . -v                    # Include ref history
    """
    repo = Repository(config)
    root = Path(directory)

    if not is_valid_ref_name(branch):
        click.echo(error(f"Invalid branch name: {branch!r}"))
        raise click.Abort()
    if tag is not None and not is_valid_ref_name(tag):
        click.echo(error(f"Invalid tag name: {tag!r}"))
        raise click.Abort()

    try:
        mapping = read_directory(root)
    except OSError as e:
        click.echo(error(f"Cannot read {directory}: {e}"))
        raise click.Abort()

    tree_hash = repo.stage(mapping)
    commit_hash = repo.commit(tree_hash, message or f"Snapshot of {root.resolve().name}", branch=branch)
    if tag is not None:
        repo.create_tag(tag, commit_hash)

    click.echo(info(f"tree   {tree_hash}"))
    click.echo(success(f"commit {commit_hash}"))
    click.echo()
    show_refs(repo)
    click.echo()
    show_stats(repo)

    invalid = sorted(sha for sha, ok in repo.analyzer.validate_repository_integrity().items() if not ok)
    for sha in invalid:
        obj = repo.retrieve(sha)
        click.echo(warning(f"Invalid {obj.type if obj else 'object'} {short(sha)}"))
    for name in repo.analyzer.find_broken_refs():
        click.echo(warning(f"Broken ref: {name}"))

    if verbose:
        limit = config.get_int('history', 'recentlimit', 10)
        click.echo()
        click.echo(f"{Fore.CYAN}Recent ref changes:{Style.RESET_ALL}")
        for change in repo.history.recent_changes(limit):
            click.echo(f"  {change.operation:<7} {change.ref_name} "
                       f"{short(change.old_target)} -> {short(change.new_target)}")

        reachability = repo.analyzer.ref_reachability('HEAD')
        click.echo(f"{len(reachability.reachable)} objects reachable from HEAD, "
                   f"{len(reachability.unreachable)} unreachable")

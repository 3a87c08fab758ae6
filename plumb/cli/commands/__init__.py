"""CLI commands for Plumb."""

from plumb.cli.commands.hash_object import hash_object_cmd
from plumb.cli.commands.check_ref_format import check_ref_format_cmd
from plumb.cli.commands.snapshot import snapshot_cmd

__all__ = ['hash_object_cmd', 'check_ref_format_cmd', 'snapshot_cmd']

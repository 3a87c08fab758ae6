"""Command-line interface for Plumb."""

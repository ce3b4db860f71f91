"""Command line interface for the vesting lock tools."""

from vesting_lock.cli.main import cli, main

__all__ = ["cli", "main"]

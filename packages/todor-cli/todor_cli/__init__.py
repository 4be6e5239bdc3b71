"""
todor command line interface.
"""

from todor_cli.cli import cli, main

__all__ = ["cli", "main"]

"""Juli CLI Package - run and inspect compiled Julk JSON programs."""

import logging

import click

from juli import __version__
from juli.cli.run import run_command
from juli.cli.info import inspect_command


@click.group()
@click.option('--verbose', '-v', is_flag=True, help='Show debug logging')
def main(verbose):
    """Juli CLI - Embeddable runtime for compiled Julk JSON."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@click.command()
def version_command():
    """Show version info."""
    print(f"Juli v{__version__}")


main.add_command(run_command, "run")
main.add_command(inspect_command, "inspect")
main.add_command(version_command, "version")

__all__ = [
    "main",
    "run_command",
    "inspect_command",
    "version_command",
]

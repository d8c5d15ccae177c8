"""CLI module for gifconform commands.

This module re-exports all command functions so the console entry point and
the tests can reach every command from one place.
"""

import click

from .gradient_cmd import gradient
from .quantizers_cmd import quantizers
from .run_cmd import run


@click.group()
@click.version_option(version="0.1.0", prog_name="gifconform")
def main() -> None:
    """🎞️ gifconform — round-trip conformance harness for animated GIF encoders."""
    pass


main.add_command(run)
main.add_command(gradient)
main.add_command(quantizers)

__all__ = [
    "gradient",
    "main",
    "quantizers",
    "run",
]

"""Listing of the available color reduction strategies."""

import click

from ..registry import DITHERERS, QUANTIZERS


@click.command()
def quantizers() -> None:
    """🎨 List the quantizers and ditherers usable with `run`."""
    click.echo("Quantizers:")
    for name in sorted(QUANTIZERS):
        click.echo(f"  {name}")
    click.echo("Ditherers:")
    for name in sorted(DITHERERS):
        click.echo(f"  {name}")

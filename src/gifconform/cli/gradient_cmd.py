"""Export of the gradient base image."""

from pathlib import Path

import click

from ..config import DEFAULT_WIPE_CONFIG
from ..error_handling import GifConformError
from ..gradient import generate_alpha_gradient
from .utils import handle_generic_error


@click.command()
@click.argument("output", type=click.Path(dir_okay=False, path_type=Path))
@click.option("--width", "-w", type=int, default=DEFAULT_WIPE_CONFIG.WIDTH, help="Width in pixels")
@click.option("--height", "-h", type=int, default=DEFAULT_WIPE_CONFIG.HEIGHT, help="Height in pixels")
def gradient(output: Path, width: int, height: int) -> None:
    """🌈 Write the hue/alpha gradient used as animation source to OUTPUT (PNG)."""
    try:
        frame = generate_alpha_gradient(width, height)
        output.parent.mkdir(parents=True, exist_ok=True)
        frame.to_image().save(output, format="PNG")
    except (GifConformError, OSError) as e:
        handle_generic_error("Gradient export", e)

    click.echo(f"✅ Wrote {width}x{height} gradient to {output}")

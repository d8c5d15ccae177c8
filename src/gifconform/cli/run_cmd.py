"""Round-trip verification of the synthetic wipe animation."""

import sys
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from ..animation import AnimationMode, SizeHandling
from ..config import (
    DEFAULT_PATH_CONFIG,
    DEFAULT_WIPE_CONFIG,
    PathConfig,
    VerificationConfig,
    WipeConfig,
)
from ..error_handling import GifConformError, ReconciliationError
from ..frame_sequence import WipeAnimation
from ..io import setup_logging
from ..registry import DITHERERS, QUANTIZERS, create_ditherer, create_quantizer
from ..roundtrip import RoundTripReport, RoundTripVerifier
from .utils import handle_generic_error, handle_keyboard_interrupt

console = Console()

# Mismatched frames listed in the report table
MAX_LISTED_FRAMES = 10


def _print_report(report: RoundTripReport) -> None:
    table = Table(title="Round-trip Verification")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    table.add_row("Stream size", f"{report.stream_size[0]}x{report.stream_size[1]}")
    table.add_row("Stream bytes", str(report.stream_bytes))
    table.add_row("Source frames", str(report.source_frame_count))
    table.add_row("Decoded frames", f"{report.decoded_frame_count} (expected {report.expected_frame_count})")
    table.add_row("Matched", str(len(report.matched_frames)))
    table.add_row("Mismatched", str(len(report.mismatched_frames)))
    table.add_row("Skipped", str(len(report.skipped_frames)))
    table.add_row("Pixel mismatches", str(report.total_mismatch_count))
    if report.saved_path is not None:
        table.add_row("Saved to", str(report.saved_path))
    console.print(table)

    if report.mismatched_frames:
        frames = Table(title="Mismatched Frames")
        frames.add_column("Frame", justify="right")
        frames.add_column("Source", justify="right")
        frames.add_column("Pixels", justify="right")
        frames.add_column("First mismatch")
        for comparison in report.mismatched_frames[:MAX_LISTED_FRAMES]:
            frames.add_row(
                str(comparison.frame_index),
                str(comparison.source_index),
                str(comparison.mismatch_count),
                str(comparison.mismatches[0]),
            )
        console.print(frames)


@click.command()
@click.option("--width", "-w", type=int, default=DEFAULT_WIPE_CONFIG.WIDTH, help="Gradient width in pixels")
@click.option(
    "--height",
    "-h",
    type=int,
    default=DEFAULT_WIPE_CONFIG.HEIGHT,
    help="Gradient height in pixels (the animation has 2*height frames)",
)
@click.option(
    "--mode",
    type=click.Choice([m.value for m in AnimationMode]),
    default=AnimationMode.NORMAL.value,
    help="Playback mode (default: normal)",
)
@click.option(
    "--size-handling",
    type=click.Choice([s.value for s in SizeHandling]),
    default=SizeHandling.ERROR_IF_DIFFERS.value,
    help="How frames of a different size are fitted (default: error-if-differs)",
)
@click.option(
    "--quantizer",
    "-q",
    type=click.Choice(sorted(QUANTIZERS)),
    default="median_cut",
    help="Color reduction strategy (default: median_cut)",
)
@click.option(
    "--ditherer",
    "-d",
    type=click.Choice(["none", *sorted(DITHERERS)]),
    default="none",
    help="Dithering strategy (default: none)",
)
@click.option("--save/--no-save", default=False, help="Save the encoded GIF")
@click.option(
    "--output-dir",
    "-o",
    type=click.Path(file_okay=False, path_type=Path),
    default=DEFAULT_PATH_CONFIG.RESULTS_DIR,
    help="Directory for saved GIFs (default: TestResults)",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    help="Logging level (default: WARNING)",
)
@click.option(
    "--log-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=DEFAULT_PATH_CONFIG.LOGS_DIR,
    help="Directory for log files (default: logs)",
)
def run(
    width: int,
    height: int,
    mode: str,
    size_handling: str,
    quantizer: str,
    ditherer: str,
    save: bool,
    output_dir: Path,
    log_level: str,
    log_dir: Path,
) -> None:
    """🎬 Encode the wipe animation, decode it and verify every frame."""
    try:
        setup_logging(log_dir, log_level)

        wipe = WipeAnimation.from_config(WipeConfig(WIDTH=width, HEIGHT=height))
        config = wipe.animation_config(
            quantizer=create_quantizer(quantizer),
            ditherer=create_ditherer(ditherer),
            animation_mode=AnimationMode(mode),
            size_handling=SizeHandling(size_handling),
        )
        verifier = RoundTripVerifier(
            verification_config=VerificationConfig(SAVE_STREAMS=save),
            path_config=PathConfig(RESULTS_DIR=output_dir),
        )

        click.echo(
            f"🎞️  Wipe animation {width}x{2 * height}, {wipe.frame_count} frames, "
            f"{mode}, {quantizer}/{ditherer}"
        )
        report = verifier.run(config, test_name="wipe", stream_name=f"{mode}_{quantizer}")
    except ReconciliationError as e:
        click.echo(f"❌ Reconciliation failed: {e}", err=True)
        sys.exit(1)
    except KeyboardInterrupt:
        handle_keyboard_interrupt("Round trip")
    except (GifConformError, ValueError) as e:
        handle_generic_error("Round trip", e)

    _print_report(report)
    if report.passed:
        click.echo("✅ All compared frames are equal")
    else:
        click.echo(f"❌ {report.summary()}", err=True)
        sys.exit(1)

"""Reconciling source frame sizes with the frame size of an encoded stream.

The encoder and the verifier both go through :func:`place_frame`, so what the
encoder was told to do and what the verifier expects to see can never drift
apart.
"""

from __future__ import annotations

from .animation import AnimationConfig, SizeHandling
from .config import DEFAULT_ENCODER_CONFIG
from .error_handling import ReconciliationError
from .frame import Frame
from .quantizers import reduce_frame


def center_offset(source_size: tuple[int, int], target_size: tuple[int, int]) -> tuple[int, int]:
    """Top-left offset that centers *source_size* on *target_size*."""
    return (
        target_size[0] // 2 - source_size[0] // 2,
        target_size[1] // 2 - source_size[1] // 2,
    )


def place_frame(
    frame: Frame,
    target_size: tuple[int, int],
    size_handling: SizeHandling,
    resampling: str = DEFAULT_ENCODER_CONFIG.RESAMPLING,
) -> Frame:
    """Fit *frame* onto *target_size* according to *size_handling*.

    Returns:
        A new owned frame of exactly *target_size*

    Raises:
        ReconciliationError: If the sizes differ under ``ERROR_IF_DIFFERS``
    """
    if frame.size == target_size:
        return frame.to_owned()

    if size_handling is SizeHandling.ERROR_IF_DIFFERS:
        raise ReconciliationError(
            f"Frame size {frame.width}x{frame.height} differs from stream size "
            f"{target_size[0]}x{target_size[1]}",
            context={"frame_size": frame.size, "stream_size": target_size},
        )
    if size_handling is SizeHandling.RESIZE:
        return frame.resized(target_size, resampling)
    return frame.placed_on(target_size, center_offset(frame.size, target_size))


def resolve_expected_frame(
    source: Frame,
    target_size: tuple[int, int],
    config: AnimationConfig,
    resampling: str = DEFAULT_ENCODER_CONFIG.RESAMPLING,
) -> Frame:
    """Compute the frame a decoder should return for *source*.

    Args:
        source: Source frame as fed to the encoder
        target_size: Frame size carried by the encoded stream
        config: Animation configuration the encoder was given
        resampling: Resampling filter the encoder used for ``RESIZE``

    Returns:
        An owned expected frame of *target_size*

    Raises:
        ReconciliationError: If the sizes differ under ``ERROR_IF_DIFFERS``
    """
    placed = place_frame(source, target_size, config.size_handling, resampling)
    return reduce_frame(placed, config.effective_quantizer, config.ditherer)

"""Deterministic gradient content for round-trip tests.

The base image is a full hue cycle along the x axis with a linear alpha fade
along the y axis. It exercises both palette reduction (many hues) and
transparency handling (every alpha level) in a single picture.
"""

import numpy as np

from .error_handling import ValidationError
from .frame import Frame
from .pixels import clip_array_to_bytes, clip_to_byte

HUE_SEGMENTS = 6


def _hue_row(width: int) -> np.ndarray:
    """Return the ``(width, 3)`` RGB values of the first gradient row.

    The row is split into six equal segments
    red → yellow → green → cyan → blue → magenta → red, and in each segment one
    channel ramps linearly while the others are held at 0 or 255.
    """
    x = np.arange(width, dtype=np.float64)
    limit = width / HUE_SEGMENTS
    ratio = 255.0 / limit

    # np.trunc rounds toward zero before clipping, also for negative ramps
    def ramp_up(segment: int) -> np.ndarray:
        return np.trunc((x - limit * segment) * ratio)

    def ramp_down(segment: int) -> np.ndarray:
        return np.trunc(255 - (x - limit * segment) * ratio)

    full = np.full(width, 255.0)
    zero = np.zeros(width)
    segments = [x < limit * i for i in range(1, HUE_SEGMENTS)]

    red = np.select(segments, [full, ramp_down(1), zero, zero, ramp_up(4)], full)
    green = np.select(segments, [ramp_up(0), full, full, ramp_down(3), zero], zero)
    blue = np.select(segments, [zero, zero, ramp_up(2), full, full], ramp_down(5))

    return clip_array_to_bytes(np.stack([red, green, blue], axis=-1))


def row_alpha(row_index: int, height: int) -> int:
    """Alpha of gradient row *row_index*, fading from opaque toward transparent."""
    return clip_to_byte(int(255 - row_index * (255.0 / height)))


def generate_alpha_gradient(width: int, height: int) -> Frame:
    """Generate the hue/alpha gradient as an owned frame.

    Args:
        width: Image width in pixels
        height: Image height in pixels

    Returns:
        A new owned frame of size ``width`` x ``height``

    Raises:
        ValidationError: If either dimension is not positive
    """
    if width <= 0 or height <= 0:
        raise ValidationError(
            f"Gradient size must be positive, got {width}x{height}",
            context={"width": width, "height": height},
        )

    frame = Frame.new(width, height)
    pixels = frame.pixels
    pixels[:, :, :3] = _hue_row(width)
    pixels[:, :, 3] = np.array(
        [row_alpha(y, height) for y in range(height)], dtype=np.uint8
    )[:, np.newaxis]
    return frame

"""Shared fixtures for the gifconform test-suite."""

import numpy as np
import pytest

from gifconform.animation import AnimationConfig
from gifconform.frame import Frame
from gifconform.frame_sequence import WipeAnimation


def make_solid_frame(width: int, height: int, color: tuple[int, int, int, int]) -> Frame:
    """Create an owned frame filled with a single RGBA color."""
    pixels = np.empty((height, width, 4), dtype=np.uint8)
    pixels[:, :] = color
    return Frame(pixels)


@pytest.fixture
def solid_frame():
    """Factory fixture for single-color frames."""
    return make_solid_frame


@pytest.fixture
def small_wipe():
    """A 12x3 gradient wipe: 6 frames on a 12x6 canvas."""
    return WipeAnimation.from_gradient(12, 3)


@pytest.fixture
def solid_frames():
    """Ten 4x4 opaque frames with distinct colors."""
    return [make_solid_frame(4, 4, (i * 20, 255 - i * 20, 40, 255)) for i in range(10)]


@pytest.fixture
def solid_config(solid_frames):
    """AnimationConfig over the ten solid frames with 100 ms delays."""
    return AnimationConfig.from_sequences(solid_frames, [100] * len(solid_frames))

"""Dithering strategies composed with a quantizer.

A ditherer perturbs the blended colors of a frame before the quantizer maps
them to its palette. The palette itself is chosen from the unperturbed colors,
so a dithered frame uses the same palette as the plain quantized one.
Both strategies are deterministic: the same frame always dithers the same way.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

import numpy as np

from .error_handling import ValidationError
from .frame import Frame
from .quantizers import Quantizer


def bayer_matrix(size: int) -> np.ndarray:
    """Return the ``size`` x ``size`` Bayer index matrix (size a power of two)."""
    if size < 2 or size & (size - 1):
        raise ValidationError(f"Bayer matrix size must be a power of two >= 2, got {size}")

    matrix = np.array([[0, 2], [3, 1]], dtype=np.int32)
    while matrix.shape[0] < size:
        matrix = np.block(
            [[4 * matrix, 4 * matrix + 2], [4 * matrix + 3, 4 * matrix + 1]]
        )
    return matrix


class Ditherer(ABC):
    """Common behaviour of all ditherers."""

    NAME: str = "ditherer"

    def __init__(self, strength: float = 32.0) -> None:
        if strength <= 0:
            raise ValidationError(f"Dither strength must be positive, got {strength}")
        self.strength = strength

    @abstractmethod
    def offsets(self, height: int, width: int) -> np.ndarray:
        """Return a ``(height, width)`` array of per-pixel color offsets."""

    def dither(self, frame: Frame, quantizer: Quantizer) -> Frame:
        rgb, visible = quantizer.prepare(frame)
        palette = quantizer.build_palette(rgb, visible)
        perturbed = rgb + self.offsets(frame.height, frame.width)[:, :, np.newaxis]
        return quantizer.compose(quantizer.map_colors(perturbed, palette), visible)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.NAME!r}, strength={self.strength})"


class OrderedDitherer(Ditherer):
    """Threshold-map dithering with a tiled Bayer matrix."""

    def __init__(self, matrix: np.ndarray, strength: float = 32.0, name: str = "ordered") -> None:
        super().__init__(strength)
        self.NAME = name
        cells = matrix.size
        # Thresholds centred on zero: (-0.5, 0.5)
        self.thresholds = (matrix.astype(np.float64) + 0.5) / cells - 0.5

    @classmethod
    def bayer2x2(cls, strength: float = 32.0) -> OrderedDitherer:
        return cls(bayer_matrix(2), strength, "bayer2x2")

    @classmethod
    def bayer4x4(cls, strength: float = 32.0) -> OrderedDitherer:
        return cls(bayer_matrix(4), strength, "bayer4x4")

    @classmethod
    def bayer8x8(cls, strength: float = 32.0) -> OrderedDitherer:
        return cls(bayer_matrix(8), strength, "bayer8x8")

    def offsets(self, height: int, width: int) -> np.ndarray:
        size = self.thresholds.shape[0]
        reps = (-(-height // size), -(-width // size))
        tiled = np.tile(self.thresholds, reps)[:height, :width]
        return np.trunc(tiled * self.strength).astype(np.int32)


class RandomNoiseDitherer(Ditherer):
    """Seeded uniform noise; reseeded per frame so results are reproducible."""

    NAME = "random_noise"

    def __init__(self, strength: float = 32.0, seed: int = 0) -> None:
        super().__init__(strength)
        self.seed = seed

    def offsets(self, height: int, width: int) -> np.ndarray:
        rng = np.random.default_rng(self.seed)
        half = int(self.strength // 2)
        return rng.integers(-half, half + 1, size=(height, width), dtype=np.int32)

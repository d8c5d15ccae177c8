"""Color reduction strategies.

The harness treats quantizers as opaque capabilities: ``quantize(frame)``
returns a frame of the same size whose colors come from a reduced palette.
Every quantizer here follows the same three steps, so that a ditherer can hook
in between them:

1. ``prepare`` blends semi-transparent pixels against the back color and
   decides which pixels stay visible (alpha at or above the threshold);
2. ``build_palette`` chooses the colors (``None`` means "keep every color");
3. ``map_colors`` replaces each color with its nearest palette entry.

Quantized frames only contain fully opaque pixels and fully transparent
``(0, 0, 0, 0)`` pixels, which is what a GIF palette can represent.

Palette selection for the optimized quantizers is delegated to Pillow's
``Image.quantize``; the final mapping is nearest-color in numpy so that the
same palette always produces the same pixels.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

import numpy as np
from PIL import Image

from .error_handling import ValidationError
from .frame import Frame

Color = tuple[int, int, int]

BLACK: Color = (0, 0, 0)
WHITE: Color = (255, 255, 255)

# A GIF color table holds 256 entries; one is kept free for transparency
MAX_PALETTE_COLORS = 255

# Unique colors compared against the palette per numpy batch
_MAPPING_CHUNK = 4096

# ITU-R BT.601 luma weights in per-mille
_LUMA_WEIGHTS = np.array([299, 587, 114], dtype=np.int32)


def _luma(rgb: np.ndarray) -> np.ndarray:
    return (rgb.astype(np.int32) @ _LUMA_WEIGHTS) // 1000


def nearest_palette_colors(rgb: np.ndarray, palette: np.ndarray) -> np.ndarray:
    """Map every RGB value of *rgb* to its nearest entry of *palette*.

    Distances are squared Euclidean in RGB space; ties go to the lower
    palette index. Only unique colors are compared, which keeps gradients
    cheap.
    """
    flat = rgb.reshape(-1, 3)
    unique, inverse = np.unique(flat, axis=0, return_inverse=True)
    inverse = inverse.reshape(-1)

    pal = palette.astype(np.int32)
    nearest = np.empty(len(unique), dtype=np.intp)
    for start in range(0, len(unique), _MAPPING_CHUNK):
        chunk = unique[start : start + _MAPPING_CHUNK].astype(np.int32)
        distances = ((chunk[:, np.newaxis, :] - pal[np.newaxis, :, :]) ** 2).sum(axis=2)
        nearest[start : start + len(chunk)] = distances.argmin(axis=1)

    return palette[nearest][inverse].reshape(rgb.shape).astype(np.uint8)


class Quantizer(ABC):
    """Common behaviour of all color reduction strategies."""

    #: Registry name, e.g. ``"octree"``
    NAME: str = "quantizer"

    def __init__(self, back_color: Color = BLACK, alpha_threshold: int = 128) -> None:
        if not 0 <= alpha_threshold <= 255:
            raise ValidationError(
                f"Alpha threshold must be between 0 and 255, got {alpha_threshold}"
            )
        self.back_color = tuple(int(c) for c in back_color)
        self.alpha_threshold = alpha_threshold

    def prepare(self, frame: Frame) -> tuple[np.ndarray, np.ndarray]:
        """Blend *frame* against the back color.

        Returns:
            ``(rgb, visible)`` where ``rgb`` is an ``int32`` ``(h, w, 3)`` array
            and ``visible`` a boolean ``(h, w)`` mask of pixels that stay opaque
        """
        pixels = frame.pixels
        alpha = pixels[:, :, 3].astype(np.int32)[:, :, np.newaxis]
        back = np.array(self.back_color, dtype=np.int32)
        rgb = (pixels[:, :, :3].astype(np.int32) * alpha + back * (255 - alpha)) // 255
        visible = pixels[:, :, 3] >= self.alpha_threshold
        if self.alpha_threshold == 0:
            visible = np.ones_like(visible)
        return rgb, visible

    @abstractmethod
    def build_palette(self, rgb: np.ndarray, visible: np.ndarray) -> np.ndarray | None:
        """Return the ``(n, 3)`` ``uint8`` palette for the visible pixels.

        ``None`` keeps the blended colors as they are.
        """

    def map_colors(self, rgb: np.ndarray, palette: np.ndarray | None) -> np.ndarray:
        """Replace every color with its palette entry."""
        clipped = np.clip(rgb, 0, 255).astype(np.uint8)
        if palette is None or len(palette) == 0:
            return clipped
        return nearest_palette_colors(clipped, palette)

    @staticmethod
    def compose(rgb: np.ndarray, visible: np.ndarray) -> Frame:
        """Assemble an owned frame from mapped colors and the visibility mask."""
        height, width = visible.shape
        result = Frame.new(width, height)
        result.pixels[visible, :3] = rgb[visible]
        result.pixels[visible, 3] = 255
        return result

    def quantize(self, frame: Frame) -> Frame:
        rgb, visible = self.prepare(frame)
        palette = self.build_palette(rgb, visible)
        return self.compose(self.map_colors(rgb, palette), visible)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(name={self.NAME!r}, back_color={self.back_color}, "
            f"alpha_threshold={self.alpha_threshold})"
        )


class PredefinedColorsQuantizer(Quantizer):
    """Quantizer with a fixed palette (or no palette at all for ``rgb888``)."""

    def __init__(
        self,
        name: str,
        palette: np.ndarray | None,
        back_color: Color = BLACK,
        alpha_threshold: int = 128,
        luma_levels: int | None = None,
    ) -> None:
        super().__init__(back_color, alpha_threshold)
        self.NAME = name
        self.palette = palette
        self.luma_levels = luma_levels

    @classmethod
    def rgb888(cls, back_color: Color = BLACK) -> PredefinedColorsQuantizer:
        """24-bit colors without transparency: only blends against *back_color*."""
        return cls("rgb888", None, back_color, alpha_threshold=0)

    @classmethod
    def rgb332(cls, back_color: Color = BLACK) -> PredefinedColorsQuantizer:
        """The 256-color 3-3-2 bit RGB palette, without transparency."""
        levels3 = np.array([round(i * 255 / 7) for i in range(8)], dtype=np.uint8)
        levels2 = np.array([0, 85, 170, 255], dtype=np.uint8)
        r, g, b = np.meshgrid(levels3, levels3, levels2, indexing="ij")
        palette = np.stack([r.ravel(), g.ravel(), b.ravel()], axis=-1)
        return cls("rgb332", palette, back_color, alpha_threshold=0)

    @classmethod
    def grayscale(
        cls, back_color: Color = BLACK, alpha_threshold: int = 128, levels: int = 255
    ) -> PredefinedColorsQuantizer:
        """Gray shades by luma; *levels* leaves room for a transparent entry."""
        if not 2 <= levels <= 256:
            raise ValidationError(f"Gray levels must be between 2 and 256, got {levels}")
        return cls("grayscale", None, back_color, alpha_threshold, luma_levels=levels)

    @classmethod
    def black_and_white(
        cls, back_color: Color = BLACK, alpha_threshold: int = 128
    ) -> PredefinedColorsQuantizer:
        """Two colors, split by luma at mid gray."""
        return cls("black_and_white", None, back_color, alpha_threshold, luma_levels=2)

    @classmethod
    def from_colors(
        cls, colors: list[Color], back_color: Color = BLACK, alpha_threshold: int = 128
    ) -> PredefinedColorsQuantizer:
        """Custom fixed palette."""
        if not 1 <= len(colors) <= 256:
            raise ValidationError(f"Palette must hold 1 to 256 colors, got {len(colors)}")
        return cls("custom", np.array(colors, dtype=np.uint8), back_color, alpha_threshold)

    def build_palette(self, rgb: np.ndarray, visible: np.ndarray) -> np.ndarray | None:
        return self.palette

    def map_colors(self, rgb: np.ndarray, palette: np.ndarray | None) -> np.ndarray:
        if self.luma_levels is None:
            return super().map_colors(rgb, palette)

        luma = np.clip(_luma(np.clip(rgb, 0, 255)), 0, 255)
        step = 255 / (self.luma_levels - 1)
        gray = np.round(np.round(luma / step) * step).astype(np.uint8)
        return np.repeat(gray[:, :, np.newaxis], 3, axis=2)


class OptimizedPaletteQuantizer(Quantizer):
    """Quantizer that picks an optimal palette per frame using Pillow."""

    def __init__(
        self,
        name: str,
        method: Image.Quantize,
        max_colors: int = MAX_PALETTE_COLORS,
        back_color: Color = BLACK,
        alpha_threshold: int = 128,
    ) -> None:
        super().__init__(back_color, alpha_threshold)
        if not 2 <= max_colors <= 256:
            raise ValidationError(f"max_colors must be between 2 and 256, got {max_colors}")
        self.NAME = name
        self.method = method
        self.max_colors = max_colors

    @classmethod
    def octree(cls, max_colors: int = MAX_PALETTE_COLORS, **kwargs: Any) -> OptimizedPaletteQuantizer:
        return cls("octree", Image.Quantize.FASTOCTREE, max_colors, **kwargs)

    @classmethod
    def median_cut(cls, max_colors: int = MAX_PALETTE_COLORS, **kwargs: Any) -> OptimizedPaletteQuantizer:
        return cls("median_cut", Image.Quantize.MEDIANCUT, max_colors, **kwargs)

    @classmethod
    def max_coverage(cls, max_colors: int = MAX_PALETTE_COLORS, **kwargs: Any) -> OptimizedPaletteQuantizer:
        return cls("max_coverage", Image.Quantize.MAXCOVERAGE, max_colors, **kwargs)

    def build_palette(self, rgb: np.ndarray, visible: np.ndarray) -> np.ndarray | None:
        colors = np.clip(rgb[visible], 0, 255).astype(np.uint8)
        if len(colors) == 0:
            return np.zeros((0, 3), dtype=np.uint8)

        unique = np.unique(colors, axis=0)
        if len(unique) <= self.max_colors:
            return unique

        # One pixel row of the visible colors keeps pixel-count weighting intact
        strip = Image.fromarray(colors.reshape(1, -1, 3))
        reduced = strip.quantize(
            colors=self.max_colors, method=self.method, dither=Image.Dither.NONE
        )
        used = sorted(index for _, index in reduced.getcolors(256))
        palette = np.array(reduced.getpalette(), dtype=np.uint8).reshape(-1, 3)
        return palette[used]


def default_quantizer() -> Quantizer:
    """Quantizer used when an animation does not configure one."""
    return OptimizedPaletteQuantizer.median_cut()


def reduce_frame(frame: Frame, quantizer: Quantizer | None = None, ditherer: Any = None) -> Frame:
    """Run *frame* through the configured quantizer and optional ditherer.

    Args:
        frame: Frame to reduce
        quantizer: Color reduction strategy (``None`` uses :func:`default_quantizer`)
        ditherer: Object with a ``dither(frame, quantizer)`` method, or ``None``

    Returns:
        A new owned frame of the same size
    """
    quantizer = quantizer or default_quantizer()
    if ditherer is None:
        return quantizer.quantize(frame)
    return ditherer.dither(frame, quantizer)

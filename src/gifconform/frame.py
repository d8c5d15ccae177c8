"""RGBA frame buffers shared by the generator, the codec and the verifier.

A :class:`Frame` wraps a ``(height, width, 4)`` ``uint8`` numpy array in
straight (non-premultiplied) RGBA order. Frames come in two flavours:

* *owned* frames hold their own buffer and stay valid for as long as they are
  referenced;
* *transient* frames are live views onto a canvas that a producer keeps
  mutating. A transient frame is only meaningful until the producer advances;
  call :meth:`Frame.to_owned` to keep a snapshot past that point.

Either kind can be released. Accessing the pixels of a released frame raises
:class:`~gifconform.error_handling.FrameReleasedError`.
"""

from __future__ import annotations

import numpy as np
from PIL import Image

from .error_handling import FrameReleasedError, ValidationError

CHANNELS = 4
TRANSPARENT = (0, 0, 0, 0)


def _resampling_filter(name: str) -> Image.Resampling:
    try:
        return Image.Resampling[name.upper()]
    except KeyError as e:
        raise ValidationError(f"Unknown resampling filter: {name}") from e


class Frame:
    """A 2D grid of RGBA pixels addressable by row."""

    def __init__(self, pixels: np.ndarray, *, transient: bool = False) -> None:
        if pixels.ndim != 3 or pixels.shape[2] != CHANNELS:
            raise ValidationError(
                f"Frame buffer must have shape (height, width, 4), got {pixels.shape}"
            )
        if pixels.dtype != np.uint8:
            raise ValidationError(f"Frame buffer must be uint8, got {pixels.dtype}")
        if pixels.shape[0] == 0 or pixels.shape[1] == 0:
            raise ValidationError(f"Frame must not be empty, got {pixels.shape}")

        self._pixels: np.ndarray | None = pixels
        self._width = pixels.shape[1]
        self._height = pixels.shape[0]
        self.transient = transient

    @classmethod
    def new(cls, width: int, height: int) -> Frame:
        """Create an owned, fully transparent frame."""
        if width <= 0 or height <= 0:
            raise ValidationError(f"Frame size must be positive, got {width}x{height}")
        return cls(np.zeros((height, width, CHANNELS), dtype=np.uint8))

    @classmethod
    def from_image(cls, image: Image.Image) -> Frame:
        """Create an owned frame from any Pillow image."""
        rgba = image if image.mode == "RGBA" else image.convert("RGBA")
        return cls(np.array(rgba, dtype=np.uint8))

    # ------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------
    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def size(self) -> tuple[int, int]:
        """``(width, height)`` like Pillow's ``Image.size``."""
        return (self._width, self._height)

    # ------------------------------------------------------------------
    # Pixel access and lifetime
    # ------------------------------------------------------------------
    @property
    def pixels(self) -> np.ndarray:
        if self._pixels is None:
            raise FrameReleasedError(
                f"Frame {self._width}x{self._height} has already been released"
            )
        return self._pixels

    @property
    def is_released(self) -> bool:
        return self._pixels is None

    def release(self) -> None:
        """Drop the pixel buffer. Releasing twice is a no-op."""
        self._pixels = None

    def row(self, y: int) -> np.ndarray:
        """Return a writable ``(width, 4)`` view of row *y*."""
        if not 0 <= y < self._height:
            raise IndexError(f"Row {y} out of range for frame height {self._height}")
        return self.pixels[y]

    def to_owned(self) -> Frame:
        """Return an independent copy that survives any later mutation of *self*."""
        return Frame(self.pixels.copy())

    def to_image(self) -> Image.Image:
        """Return a Pillow RGBA image holding a copy of the pixels."""
        return Image.fromarray(self.pixels.copy())

    def same_pixels(self, other: Frame) -> bool:
        """Return ``True`` iff both frames have identical size and pixels."""
        return self.size == other.size and bool(np.array_equal(self.pixels, other.pixels))

    # ------------------------------------------------------------------
    # Placement primitives (shared by the encoder and the verifier)
    # ------------------------------------------------------------------
    def resized(self, size: tuple[int, int], resampling: str = "bilinear") -> Frame:
        """Scale the frame to exactly *size*, without letterboxing."""
        if size == self.size:
            return self.to_owned()
        scaled = self.to_image().resize(size, _resampling_filter(resampling))
        return Frame.from_image(scaled)

    def placed_on(self, size: tuple[int, int], offset: tuple[int, int]) -> Frame:
        """Copy the frame unscaled onto a transparent canvas of *size*.

        The top-left corner lands at *offset*; anything outside the canvas is
        clipped.
        """
        result = Frame.new(*size)
        ox, oy = offset

        dst_x0, dst_y0 = max(ox, 0), max(oy, 0)
        dst_x1 = min(ox + self._width, size[0])
        dst_y1 = min(oy + self._height, size[1])
        if dst_x0 >= dst_x1 or dst_y0 >= dst_y1:
            return result

        src_x0, src_y0 = dst_x0 - ox, dst_y0 - oy
        result.pixels[dst_y0:dst_y1, dst_x0:dst_x1] = self.pixels[
            src_y0 : src_y0 + (dst_y1 - dst_y0), src_x0 : src_x0 + (dst_x1 - dst_x0)
        ]
        return result

    def __repr__(self) -> str:
        state = "released" if self.is_released else ("transient" if self.transient else "owned")
        return f"Frame({self._width}x{self._height}, {state})"

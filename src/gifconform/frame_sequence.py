"""Streaming "wipe" animation built from a single source image.

The animation is twice as tall as the source. Every frame is produced by
copying one more source row into a shared canvas, so a traversal needs one
canvas no matter how many frames it yields:

* reveal (frames ``0 .. H-1``): source rows ``H-1 .. 0`` are copied to canvas
  rows ``1 .. H``, blended against white;
* conceal (frames ``H .. 2H-1``): source rows ``0 .. H-1`` are copied to canvas
  rows ``H .. 2H-1``, blended against black.

The frames yielded by one traversal are all the *same* transient
:class:`~gifconform.frame.Frame`. Use a frame before asking for the next one,
or keep a :meth:`~gifconform.frame.Frame.to_owned` snapshot. The canvas is
released when its traversal ends.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import Any

import numpy as np

from .animation import AnimationConfig
from .config import DEFAULT_WIPE_CONFIG, WipeConfig
from .error_handling import ValidationError
from .frame import Frame
from .gradient import generate_alpha_gradient
from .quantizers import BLACK, WHITE, PredefinedColorsQuantizer, Quantizer

logger = logging.getLogger(__name__)


class WipeAnimation:
    """Restartable frame and delay factories for the wipe animation."""

    def __init__(
        self,
        source: Frame,
        step_delay_ms: int = DEFAULT_WIPE_CONFIG.STEP_DELAY_MS,
        hold_delay_ms: int = DEFAULT_WIPE_CONFIG.HOLD_DELAY_MS,
        reveal_quantizer: Quantizer | None = None,
        conceal_quantizer: Quantizer | None = None,
    ) -> None:
        if hold_delay_ms <= step_delay_ms:
            raise ValidationError(
                f"Hold delay ({hold_delay_ms} ms) must be longer than the step delay "
                f"({step_delay_ms} ms)"
            )

        # The source is shared by every traversal and must never change
        self.source = source.to_owned()
        self.source.pixels.flags.writeable = False

        self.step_delay_ms = step_delay_ms
        self.hold_delay_ms = hold_delay_ms
        self.reveal_quantizer = reveal_quantizer or PredefinedColorsQuantizer.rgb888(WHITE)
        self.conceal_quantizer = conceal_quantizer or PredefinedColorsQuantizer.rgb888(BLACK)

    @classmethod
    def from_gradient(cls, width: int, height: int, **kwargs: Any) -> WipeAnimation:
        """Wipe animation over :func:`~gifconform.gradient.generate_alpha_gradient`."""
        return cls(generate_alpha_gradient(width, height), **kwargs)

    @classmethod
    def from_config(cls, config: WipeConfig = DEFAULT_WIPE_CONFIG) -> WipeAnimation:
        return cls.from_gradient(
            config.WIDTH,
            config.HEIGHT,
            step_delay_ms=config.STEP_DELAY_MS,
            hold_delay_ms=config.HOLD_DELAY_MS,
        )

    @property
    def frame_count(self) -> int:
        return 2 * self.source.height

    @property
    def canvas_size(self) -> tuple[int, int]:
        return (self.source.width, 2 * self.source.height)

    def _copy_row(self, canvas: Frame, source_y: int, canvas_y: int, quantizer: Quantizer) -> None:
        row = Frame(np.ascontiguousarray(self.source.pixels[source_y : source_y + 1]))
        canvas.pixels[canvas_y] = quantizer.quantize(row).pixels[0]

    def frames(self) -> Iterator[Frame]:
        """Start a new traversal over a freshly allocated canvas.

        The canvas is released when the traversal is exhausted, closed or
        dropped. Keep a reference to the generator while using its frames:
        ``next(wipe.frames())`` returns an already released frame.
        """
        width, height = self.source.width, self.source.height
        canvas = Frame(np.zeros((2 * height, width, 4), dtype=np.uint8), transient=True)
        logger.debug(f"Allocated {width}x{2 * height} wipe canvas")

        try:
            for y in range(height - 1, -1, -1):
                self._copy_row(canvas, y, height - y, self.reveal_quantizer)
                yield canvas

            for y in range(height):
                self._copy_row(canvas, y, y + height, self.conceal_quantizer)
                yield canvas
        finally:
            canvas.release()

    def delays(self) -> Iterator[int]:
        """Delays in milliseconds, one per frame, with a long hold on the last."""
        for _ in range(self.frame_count - 1):
            yield self.step_delay_ms
        yield self.hold_delay_ms

    def animation_config(self, **options: Any) -> AnimationConfig:
        """Wrap both factories into an :class:`AnimationConfig`."""
        return AnimationConfig(frames=self.frames, delays=self.delays, **options)

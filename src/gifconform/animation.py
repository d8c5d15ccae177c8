"""Animation configuration shared by the encoder and the round-trip verifier."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any

from .error_handling import ValidationError
from .frame import Frame
from .quantizers import Quantizer, default_quantizer

FrameFactory = Callable[[], Iterable[Frame]]
DelayFactory = Callable[[], Iterable[int]]


class AnimationMode(Enum):
    """Playback mode of the encoded animation."""

    NORMAL = "normal"
    PING_PONG = "ping-pong"


class SizeHandling(Enum):
    """How frames that differ from the first frame's size are reconciled."""

    ERROR_IF_DIFFERS = "error-if-differs"
    RESIZE = "resize"
    CENTER = "center"


@dataclass(frozen=True)
class AnimationConfig:
    """Everything an encoder needs to produce an animation.

    ``frames`` and ``delays`` are factories: every call starts a new,
    independent traversal. The encoder consumes one traversal and the
    verifier requests another one for comparison.
    """

    frames: FrameFactory
    delays: DelayFactory
    quantizer: Quantizer | None = None
    ditherer: Any = None
    animation_mode: AnimationMode = AnimationMode.NORMAL
    size_handling: SizeHandling = SizeHandling.ERROR_IF_DIFFERS

    def __post_init__(self) -> None:
        if not callable(self.frames):
            raise ValidationError("AnimationConfig.frames must be a callable frame factory")
        if not callable(self.delays):
            raise ValidationError("AnimationConfig.delays must be a callable delay factory")
        if not isinstance(self.animation_mode, AnimationMode):
            raise ValidationError(f"Invalid animation mode: {self.animation_mode!r}")
        if not isinstance(self.size_handling, SizeHandling):
            raise ValidationError(f"Invalid size handling: {self.size_handling!r}")

    @classmethod
    def from_sequences(
        cls, frames: Sequence[Frame], delays: Sequence[int], **options: Any
    ) -> AnimationConfig:
        """Build a config over already materialized frames and delays."""
        frames = list(frames)
        delays = list(delays)
        return cls(frames=lambda: iter(frames), delays=lambda: iter(delays), **options)

    @property
    def effective_quantizer(self) -> Quantizer:
        return self.quantizer or default_quantizer()

    def with_options(self, **changes: Any) -> AnimationConfig:
        return replace(self, **changes)

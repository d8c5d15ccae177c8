"""Bit-exact frame comparison."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

import numpy as np

from .frame import Frame


class FrameStatus(Enum):
    """Outcome of comparing one decoded frame."""

    MATCHED = "matched"
    MISMATCHED = "mismatched"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class PixelMismatch:
    """A single pixel whose decoded value differs from the expected one."""

    frame_index: int
    x: int
    y: int
    expected: tuple[int, int, int, int]
    actual: tuple[int, int, int, int]

    def __str__(self) -> str:
        return (
            f"frame #{self.frame_index} pixel ({self.x}, {self.y}): "
            f"expected {self.expected}, got {self.actual}"
        )


@dataclass
class FrameComparison:
    """Comparison result for one decoded frame."""

    frame_index: int
    source_index: int
    status: FrameStatus
    mismatch_count: int = 0
    mismatches: list[PixelMismatch] = field(default_factory=list)

    @property
    def matched(self) -> bool:
        return self.status is FrameStatus.MATCHED


def compare_frames(
    expected: Frame,
    actual: Frame,
    frame_index: int,
    source_index: int | None = None,
    max_mismatches: int | None = None,
) -> FrameComparison:
    """Compare two equally sized frames channel by channel without tolerance.

    Args:
        expected: Reference frame
        actual: Decoded frame
        frame_index: Index of the decoded frame, used in mismatch reports
        source_index: Index of the source frame (defaults to frame_index)
        max_mismatches: Maximum number of mismatches to record; all of them are
            still counted

    Returns:
        FrameComparison with every recorded mismatch in row-major order

    Raises:
        ValueError: If the frame sizes differ
    """
    if expected.size != actual.size:
        raise ValueError(
            f"Cannot compare frame #{frame_index}: expected size {expected.size}, "
            f"actual size {actual.size}"
        )

    source_index = frame_index if source_index is None else source_index
    differs = np.any(expected.pixels != actual.pixels, axis=2)
    positions = np.argwhere(differs)
    if len(positions) == 0:
        return FrameComparison(frame_index, source_index, FrameStatus.MATCHED)

    recorded = positions if max_mismatches is None else positions[:max_mismatches]
    mismatches = [
        PixelMismatch(
            frame_index=frame_index,
            x=int(x),
            y=int(y),
            expected=tuple(int(c) for c in expected.pixels[y, x]),
            actual=tuple(int(c) for c in actual.pixels[y, x]),
        )
        for y, x in recorded
    ]
    return FrameComparison(
        frame_index,
        source_index,
        FrameStatus.MISMATCHED,
        mismatch_count=len(positions),
        mismatches=mismatches,
    )


def skipped_frame(frame_index: int, source_index: int | None = None) -> FrameComparison:
    """Result for a frame whose source had already been released."""
    source_index = frame_index if source_index is None else source_index
    return FrameComparison(frame_index, source_index, FrameStatus.SKIPPED)

"""Round-trip verification of an animation encoder.

The verifier encodes an :class:`~gifconform.animation.AnimationConfig`,
decodes the stream, checks the decoded frame count against the playback mode
and then walks a fresh traversal of the source frames. For every source frame
it computes the expected decoded frame (size handling plus the configured
quantizer and ditherer) and compares it bit-exactly with each decoded frame
that shows it. Source frames are handled one at a time, so a shared-canvas
frame sequence is used before it advances.

Frame count and size violations raise
:class:`~gifconform.error_handling.ReconciliationError`; pixel mismatches are
collected in the :class:`RoundTripReport`.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .animation import AnimationConfig
from .codec import DecodedAnimation, decode_animation, encode_animation
from .compare import FrameComparison, FrameStatus, PixelMismatch, compare_frames, skipped_frame
from .config import (
    DEFAULT_ENCODER_CONFIG,
    DEFAULT_PATH_CONFIG,
    DEFAULT_VERIFICATION_CONFIG,
    EncoderConfig,
    PathConfig,
    VerificationConfig,
)
from .error_handling import log_info_with_context, safe_operation
from .frame import Frame
from .io import save_stream
from .reconcile import check_frame_count, decoded_indices_for
from .size_handling import resolve_expected_frame

logger = logging.getLogger(__name__)

Encoder = Callable[[AnimationConfig, EncoderConfig], bytes]
Decoder = Callable[[bytes], DecodedAnimation]


@dataclass
class RoundTripReport:
    """Outcome of one verification run."""

    source_frame_count: int
    expected_frame_count: int
    decoded_frame_count: int
    stream_size: tuple[int, int]
    stream_bytes: int
    comparisons: list[FrameComparison] = field(default_factory=list)
    saved_path: Path | None = None

    def _with_status(self, status: FrameStatus) -> list[FrameComparison]:
        return [c for c in self.comparisons if c.status is status]

    @property
    def matched_frames(self) -> list[FrameComparison]:
        return self._with_status(FrameStatus.MATCHED)

    @property
    def mismatched_frames(self) -> list[FrameComparison]:
        return self._with_status(FrameStatus.MISMATCHED)

    @property
    def skipped_frames(self) -> list[FrameComparison]:
        return self._with_status(FrameStatus.SKIPPED)

    @property
    def mismatches(self) -> list[PixelMismatch]:
        return [m for c in self.comparisons for m in c.mismatches]

    @property
    def total_mismatch_count(self) -> int:
        return sum(c.mismatch_count for c in self.comparisons)

    @property
    def passed(self) -> bool:
        return not self.mismatched_frames

    def summary(self) -> str:
        verdict = "PASS" if self.passed else "FAIL"
        return (
            f"{verdict}: {len(self.matched_frames)} matched, "
            f"{len(self.mismatched_frames)} mismatched, "
            f"{len(self.skipped_frames)} skipped of {self.decoded_frame_count} decoded frames "
            f"({self.total_mismatch_count} pixel mismatches)"
        )


def _close_traversal(traversal: Iterator[Frame]) -> None:
    # Generators release their canvas on close; plain iterators have nothing to close
    close = getattr(traversal, "close", None)
    if close is not None:
        close()


def count_source_frames(config: AnimationConfig) -> int:
    """Count the frames of one dedicated traversal without touching pixels."""
    return sum(1 for _ in config.frames())


class RoundTripVerifier:
    """Encode, decode and compare an animation against its own configuration."""

    def __init__(
        self,
        encoder: Encoder = encode_animation,
        decoder: Decoder = decode_animation,
        encoder_config: EncoderConfig = DEFAULT_ENCODER_CONFIG,
        verification_config: VerificationConfig = DEFAULT_VERIFICATION_CONFIG,
        path_config: PathConfig = DEFAULT_PATH_CONFIG,
    ) -> None:
        self.encoder = encoder
        self.decoder = decoder
        self.encoder_config = encoder_config
        self.verification_config = verification_config
        self.path_config = path_config

    def run(
        self, config: AnimationConfig, test_name: str = "roundtrip", stream_name: str | None = None
    ) -> RoundTripReport:
        """Encode *config* and verify the resulting stream."""
        data = self.encoder(config, self.encoder_config)

        saved_path = None
        if self.verification_config.SAVE_STREAMS:
            saved_path = save_stream(data, test_name, stream_name, self.path_config.RESULTS_DIR)

        report = self.verify(config, data)
        report.saved_path = saved_path
        return report

    def verify(
        self, config: AnimationConfig, data: bytes, sources: Iterable[Frame] | None = None
    ) -> RoundTripReport:
        """Verify an already encoded stream.

        Args:
            config: Configuration the stream was encoded with
            data: Encoded stream
            sources: Source frames to compare against; defaults to a fresh
                traversal of ``config.frames()``

        Returns:
            RoundTripReport with one comparison per decoded frame

        Raises:
            ReconciliationError: On a frame count mismatch or a size mismatch
                under ``ERROR_IF_DIFFERS``
        """
        decoded = self.decoder(data)
        try:
            if sources is not None:
                sources = list(sources)
                source_count = len(sources)
            else:
                source_count = count_source_frames(config)

            decoded_count = len(decoded.frames)
            expected_count = check_frame_count(source_count, decoded_count, config.animation_mode)
            traversal = iter(sources if sources is not None else config.frames())
            try:
                comparisons = self._compare_sources(config, decoded, source_count, traversal)
            finally:
                _close_traversal(traversal)
        finally:
            safe_operation(
                decoded.release,
                "release decoded frames",
                context={"frames": len(decoded.frames)},
                logger=logger,
            )

        report = RoundTripReport(
            source_frame_count=source_count,
            expected_frame_count=expected_count,
            decoded_frame_count=decoded_count,
            stream_size=decoded.info.size,
            stream_bytes=len(data),
            comparisons=comparisons,
        )
        log_info_with_context(report.summary(), logger=logger)
        return report

    def _compare_sources(
        self,
        config: AnimationConfig,
        decoded: DecodedAnimation,
        source_count: int,
        sources: Iterable[Frame],
    ) -> list[FrameComparison]:
        results: dict[int, FrameComparison] = {}
        max_mismatches = self.verification_config.MAX_MISMATCHES_PER_FRAME

        for source_index, source in enumerate(sources):
            indices = decoded_indices_for(source_index, source_count, config.animation_mode)
            if source.is_released:
                logger.debug(f"Source frame #{source_index} already released, skipped")
                for index in indices:
                    results[index] = skipped_frame(index, source_index)
                continue

            expected = resolve_expected_frame(
                source, decoded.info.size, config, self.encoder_config.RESAMPLING
            )
            try:
                for index in indices:
                    comparison = compare_frames(
                        expected, decoded.frames[index], index, source_index, max_mismatches
                    )
                    results[index] = comparison
                    if comparison.matched:
                        logger.debug(f"Frame #{index}: equals")
                    else:
                        logger.warning(
                            f"Frame #{index}: {comparison.mismatch_count} pixel mismatches, "
                            f"first at {comparison.mismatches[0]}"
                        )
            finally:
                expected.release()

        return [results[index] for index in sorted(results)]


def verify_round_trip(config: AnimationConfig, **kwargs: Any) -> RoundTripReport:
    """Convenience wrapper around :meth:`RoundTripVerifier.run`."""
    return RoundTripVerifier(**kwargs).run(config)

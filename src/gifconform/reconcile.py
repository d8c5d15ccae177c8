"""Frame count reconciliation between source sequences and decoded streams."""

from .animation import AnimationMode
from .error_handling import ReconciliationError, ValidationError


def expected_frame_count(source_count: int, mode: AnimationMode) -> int:
    """Number of frames a decoded stream must contain.

    Ping-pong playback appends the frames in reverse order without repeating
    the first and the last one.

    Args:
        source_count: Number of frames fed to the encoder
        mode: Playback mode the encoder was configured with

    Returns:
        Expected decoded frame count

    Raises:
        ValidationError: If source_count is negative
    """
    if source_count < 0:
        raise ValidationError(f"Source frame count must be >= 0, got {source_count}")

    if mode is AnimationMode.PING_PONG:
        return source_count + max(0, source_count - 2)
    return source_count


def decoded_indices_for(source_index: int, source_count: int, mode: AnimationMode) -> list[int]:
    """All decoded frame indices that show source frame *source_index*."""
    indices = [source_index]
    if mode is AnimationMode.PING_PONG and 0 < source_index < source_count - 1:
        indices.append(2 * (source_count - 1) - source_index)
    return indices


def check_frame_count(source_count: int, decoded_count: int, mode: AnimationMode) -> int:
    """Raise unless *decoded_count* matches the expected count exactly.

    Returns:
        The expected frame count

    Raises:
        ReconciliationError: On any mismatch
    """
    expected = expected_frame_count(source_count, mode)
    if decoded_count != expected:
        raise ReconciliationError(
            f"Decoded stream has {decoded_count} frames, expected {expected} "
            f"({source_count} source frames, {mode.value} mode)",
            context={
                "source_count": source_count,
                "decoded_count": decoded_count,
                "expected_count": expected,
                "mode": mode.value,
            },
        )
    return expected

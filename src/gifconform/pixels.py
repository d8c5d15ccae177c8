"""Integer helpers for 8-bit channel arithmetic and palette sizing."""

import numpy as np

BYTE_MIN = 0
BYTE_MAX = 255


def clip_to_byte(value: int) -> int:
    """Clamp an integer to the 0-255 channel range."""
    if value < BYTE_MIN:
        return BYTE_MIN
    if value > BYTE_MAX:
        return BYTE_MAX
    return int(value)


def clip_array_to_bytes(values: np.ndarray) -> np.ndarray:
    """Vectorised :func:`clip_to_byte` returning a ``uint8`` array."""
    return np.clip(values, BYTE_MIN, BYTE_MAX).astype(np.uint8)


def bits_per_pixel(color_count: int) -> int:
    """Return the bits needed to index *color_count* palette entries.

    This is ``ceil(log2(color_count))`` except that a single color still
    needs one bit.

    Raises:
        ValueError: If color_count is not positive
    """
    if color_count <= 0:
        raise ValueError(f"Color count must be positive, got {color_count}")
    if color_count == 1:
        return 1

    bpp = 0
    n = color_count - 1
    while n > 0:
        bpp += 1
        n >>= 1
    return bpp


def round_up_to_power_of_2(value: int) -> int:
    """Round a positive 32-bit value up to the next power of two."""
    if value <= 0:
        raise ValueError(f"Value must be positive, got {value}")
    value -= 1
    value |= value >> 1
    value |= value >> 2
    value |= value >> 4
    value |= value >> 8
    value |= value >> 16
    return value + 1

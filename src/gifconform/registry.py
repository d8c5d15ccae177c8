"""Name-based lookup of quantizers and ditherers for the command line."""

from collections.abc import Callable

from .dithering import Ditherer, OrderedDitherer, RandomNoiseDitherer
from .error_handling import ValidationError
from .quantizers import OptimizedPaletteQuantizer, PredefinedColorsQuantizer, Quantizer

QUANTIZERS: dict[str, Callable[[], Quantizer]] = {
    "median_cut": OptimizedPaletteQuantizer.median_cut,
    "octree": OptimizedPaletteQuantizer.octree,
    "max_coverage": OptimizedPaletteQuantizer.max_coverage,
    "rgb332": PredefinedColorsQuantizer.rgb332,
    "grayscale": PredefinedColorsQuantizer.grayscale,
    "black_and_white": PredefinedColorsQuantizer.black_and_white,
}

DITHERERS: dict[str, Callable[[], Ditherer]] = {
    "bayer2x2": OrderedDitherer.bayer2x2,
    "bayer4x4": OrderedDitherer.bayer4x4,
    "bayer8x8": OrderedDitherer.bayer8x8,
    "random_noise": RandomNoiseDitherer,
}


def create_quantizer(name: str) -> Quantizer:
    try:
        return QUANTIZERS[name]()
    except KeyError:
        raise ValidationError(
            f"Unknown quantizer: {name} (available: {', '.join(sorted(QUANTIZERS))})"
        ) from None


def create_ditherer(name: str | None) -> Ditherer | None:
    """Return ``None`` for ``None`` or ``"none"``."""
    if name is None or name == "none":
        return None
    try:
        return DITHERERS[name]()
    except KeyError:
        raise ValidationError(
            f"Unknown ditherer: {name} (available: {', '.join(sorted(DITHERERS))})"
        ) from None

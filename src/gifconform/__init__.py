"""gifconform - round-trip conformance harness for animated GIF encoders."""

__version__: str = "0.1.0"

# Public re-exports for convenience ---------------------------------------------------

from .animation import AnimationConfig, AnimationMode, SizeHandling
from .codec import DecodedAnimation, GifStreamInfo, decode_animation, encode_animation, read_stream_info
from .compare import FrameComparison, FrameStatus, PixelMismatch, compare_frames
from .dithering import Ditherer, OrderedDitherer, RandomNoiseDitherer
from .error_handling import (
    DecodingError,
    EncodingError,
    FrameReleasedError,
    GifConformError,
    ReconciliationError,
    ValidationError,
)
from .frame import Frame
from .frame_sequence import WipeAnimation
from .gradient import generate_alpha_gradient
from .quantizers import OptimizedPaletteQuantizer, PredefinedColorsQuantizer, Quantizer
from .reconcile import expected_frame_count
from .roundtrip import RoundTripReport, RoundTripVerifier, verify_round_trip
from .size_handling import resolve_expected_frame

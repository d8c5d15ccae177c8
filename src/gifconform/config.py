"""Configuration settings for the conformance harness."""

from dataclasses import dataclass
from pathlib import Path

# Pillow resampling filters accepted by EncoderConfig.RESAMPLING
RESAMPLING_FILTERS = ("nearest", "box", "bilinear", "hamming", "bicubic", "lanczos")


@dataclass
class WipeConfig:
    """Configuration for the synthetic wipe animation."""

    # Size of the gradient source image; the animation canvas is WIDTH x 2*HEIGHT
    WIDTH: int = 48
    HEIGHT: int = 16

    # Delay of every frame but the last one
    STEP_DELAY_MS: int = 20

    # Delay of the last frame so looping playback pauses before restarting
    HOLD_DELAY_MS: int = 3000

    def __post_init__(self) -> None:
        if self.WIDTH <= 0 or self.HEIGHT <= 0:
            raise ValueError(
                f"Wipe size must be positive, got {self.WIDTH}x{self.HEIGHT}"
            )
        if self.STEP_DELAY_MS < 0:
            raise ValueError(f"STEP_DELAY_MS must be >= 0, got {self.STEP_DELAY_MS}")
        if self.HOLD_DELAY_MS <= self.STEP_DELAY_MS:
            raise ValueError(
                "HOLD_DELAY_MS must be longer than STEP_DELAY_MS, "
                f"got {self.HOLD_DELAY_MS} <= {self.STEP_DELAY_MS}"
            )


@dataclass
class EncoderConfig:
    """Configuration for the GIF encoder and the placement of resized frames."""

    # NETSCAPE2.0 loop count (0 = loop forever, None = no loop extension)
    LOOP: int | None = 0

    # Pillow resampling filter used when a frame is resized to the logical screen
    RESAMPLING: str = "bilinear"

    def __post_init__(self) -> None:
        if self.LOOP is not None and not 0 <= self.LOOP <= 0xFFFF:
            raise ValueError(f"LOOP must be between 0 and 65535, got {self.LOOP}")
        if self.RESAMPLING not in RESAMPLING_FILTERS:
            raise ValueError(
                f"Invalid resampling filter: {self.RESAMPLING}, "
                f"expected one of {RESAMPLING_FILTERS}"
            )


@dataclass
class VerificationConfig:
    """Configuration for round-trip verification."""

    # Maximum mismatches recorded per frame (None = collect every mismatch)
    MAX_MISMATCHES_PER_FRAME: int | None = None

    # Save every encoded stream under PathConfig.RESULTS_DIR
    SAVE_STREAMS: bool = False

    def __post_init__(self) -> None:
        if self.MAX_MISMATCHES_PER_FRAME is not None and self.MAX_MISMATCHES_PER_FRAME <= 0:
            raise ValueError(
                "MAX_MISMATCHES_PER_FRAME must be positive or None, "
                f"got {self.MAX_MISMATCHES_PER_FRAME}"
            )


@dataclass
class PathConfig:
    """Configuration for file paths and directories."""

    RESULTS_DIR: Path = Path("TestResults")
    LOGS_DIR: Path = Path("logs")


DEFAULT_WIPE_CONFIG = WipeConfig()
DEFAULT_ENCODER_CONFIG = EncoderConfig()
DEFAULT_VERIFICATION_CONFIG = VerificationConfig()
DEFAULT_PATH_CONFIG = PathConfig()

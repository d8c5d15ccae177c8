"""Tests for gifconform.config module."""

from pathlib import Path

import pytest

from gifconform.config import (
    DEFAULT_ENCODER_CONFIG,
    DEFAULT_PATH_CONFIG,
    DEFAULT_VERIFICATION_CONFIG,
    DEFAULT_WIPE_CONFIG,
    EncoderConfig,
    PathConfig,
    VerificationConfig,
    WipeConfig,
)


class TestWipeConfig:
    """Tests for WipeConfig class."""

    def test_default_initialization(self):
        """Test that default values are set correctly."""
        config = WipeConfig()

        assert config.WIDTH == 48
        assert config.HEIGHT == 16
        assert config.STEP_DELAY_MS == 20
        assert config.HOLD_DELAY_MS == 3000

    @pytest.mark.parametrize("width,height", [(0, 16), (48, 0), (-1, -1)])
    def test_invalid_size(self, width, height):
        """Test that non-positive sizes are rejected."""
        with pytest.raises(ValueError, match="Wipe size must be positive"):
            WipeConfig(WIDTH=width, HEIGHT=height)

    def test_invalid_step_delay(self):
        """Test that negative step delays are rejected."""
        with pytest.raises(ValueError):
            WipeConfig(STEP_DELAY_MS=-1)

    def test_hold_shorter_than_step(self):
        """Test that the hold delay must exceed the step delay."""
        with pytest.raises(ValueError, match="HOLD_DELAY_MS"):
            WipeConfig(STEP_DELAY_MS=100, HOLD_DELAY_MS=100)


class TestEncoderConfig:
    """Tests for EncoderConfig class."""

    def test_default_initialization(self):
        """Test that default values are set correctly."""
        config = EncoderConfig()

        assert config.LOOP == 0
        assert config.RESAMPLING == "bilinear"

    def test_no_loop(self):
        """Test that LOOP may be disabled."""
        assert EncoderConfig(LOOP=None).LOOP is None

    @pytest.mark.parametrize("loop", [-1, 65536])
    def test_invalid_loop(self, loop):
        """Test the loop count range."""
        with pytest.raises(ValueError):
            EncoderConfig(LOOP=loop)

    def test_invalid_resampling(self):
        """Test that unknown resampling filters are rejected."""
        with pytest.raises(ValueError, match="Invalid resampling filter"):
            EncoderConfig(RESAMPLING="sinc")


class TestVerificationConfig:
    """Tests for VerificationConfig class."""

    def test_default_initialization(self):
        """Test that every mismatch is collected by default."""
        config = VerificationConfig()

        assert config.MAX_MISMATCHES_PER_FRAME is None
        assert config.SAVE_STREAMS is False

    def test_invalid_cap(self):
        """Test that a zero cap is rejected."""
        with pytest.raises(ValueError):
            VerificationConfig(MAX_MISMATCHES_PER_FRAME=0)


class TestPathConfig:
    """Tests for PathConfig class."""

    def test_default_paths(self):
        """Test default path configuration."""
        config = PathConfig()

        assert config.RESULTS_DIR == Path("TestResults")
        assert config.LOGS_DIR == Path("logs")

    def test_custom_paths(self):
        """Test custom path configuration."""
        config = PathConfig(RESULTS_DIR=Path("/custom/results"))

        assert config.RESULTS_DIR == Path("/custom/results")
        # Other paths should remain default
        assert config.LOGS_DIR == Path("logs")


class TestDefaultConfigs:
    """Tests for default configuration instances."""

    def test_defaults_exist(self):
        """Test that module-level defaults are instances of their classes."""
        assert isinstance(DEFAULT_WIPE_CONFIG, WipeConfig)
        assert isinstance(DEFAULT_ENCODER_CONFIG, EncoderConfig)
        assert isinstance(DEFAULT_VERIFICATION_CONFIG, VerificationConfig)
        assert isinstance(DEFAULT_PATH_CONFIG, PathConfig)

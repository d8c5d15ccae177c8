"""Tests for gifconform.animation module."""

import pytest

from gifconform.animation import AnimationConfig, AnimationMode, SizeHandling
from gifconform.error_handling import ValidationError
from gifconform.quantizers import PredefinedColorsQuantizer


class TestAnimationConfig:
    """Tests for AnimationConfig construction and defaults."""

    def test_defaults(self, solid_config):
        """Test the default playback mode and size policy."""
        assert solid_config.quantizer is None
        assert solid_config.ditherer is None
        assert solid_config.animation_mode is AnimationMode.NORMAL
        assert solid_config.size_handling is SizeHandling.ERROR_IF_DIFFERS

    def test_effective_quantizer_default(self, solid_config):
        """Test that an unset quantizer resolves to median cut."""
        assert solid_config.effective_quantizer.NAME == "median_cut"

    def test_effective_quantizer_configured(self, solid_config):
        """Test that a configured quantizer is used as is."""
        quantizer = PredefinedColorsQuantizer.rgb332()

        assert solid_config.with_options(quantizer=quantizer).effective_quantizer is quantizer

    def test_frames_factory_is_restartable(self, solid_config):
        """Test that every call starts a new traversal."""
        assert len(list(solid_config.frames())) == 10
        assert len(list(solid_config.frames())) == 10
        assert list(solid_config.delays()) == [100] * 10

    def test_with_options_returns_new_config(self, solid_config):
        """Test that with_options leaves the original untouched."""
        changed = solid_config.with_options(animation_mode=AnimationMode.PING_PONG)

        assert changed.animation_mode is AnimationMode.PING_PONG
        assert solid_config.animation_mode is AnimationMode.NORMAL

    def test_config_is_frozen(self, solid_config):
        """Test that the configuration cannot be mutated."""
        with pytest.raises(AttributeError):
            solid_config.animation_mode = AnimationMode.PING_PONG

    def test_missing_frame_factory(self):
        """Test that a non-callable frame factory is rejected."""
        with pytest.raises(ValidationError, match="frame factory"):
            AnimationConfig(frames=None, delays=lambda: iter([]))

    def test_missing_delay_factory(self):
        """Test that a non-callable delay factory is rejected."""
        with pytest.raises(ValidationError, match="delay factory"):
            AnimationConfig(frames=lambda: iter([]), delays=[100])

    def test_mode_must_be_enum(self):
        """Test that raw strings are not accepted as modes."""
        with pytest.raises(ValidationError):
            AnimationConfig.from_sequences([], [], animation_mode="ping-pong")

    def test_size_handling_must_be_enum(self):
        """Test that raw strings are not accepted as size policies."""
        with pytest.raises(ValidationError):
            AnimationConfig.from_sequences([], [], size_handling="center")


class TestEnums:
    """Tests for the CLI-facing enum values."""

    def test_mode_values(self):
        """Test the playback mode names."""
        assert AnimationMode("ping-pong") is AnimationMode.PING_PONG
        assert AnimationMode("normal") is AnimationMode.NORMAL

    def test_size_handling_values(self):
        """Test the size policy names."""
        assert [s.value for s in SizeHandling] == ["error-if-differs", "resize", "center"]

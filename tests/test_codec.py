"""Tests for gifconform.codec module."""

import logging
from io import BytesIO

import numpy as np
import pytest
from PIL import Image

from gifconform.animation import AnimationConfig, AnimationMode, SizeHandling
from gifconform.codec import (
    GIF_SIGNATURE,
    _local_table_entries,
    decode_animation,
    encode_animation,
    read_stream_info,
    to_palette_image,
)
from gifconform.config import EncoderConfig
from gifconform.error_handling import (
    DecodingError,
    EncodingError,
    ReconciliationError,
    ValidationError,
)
from gifconform.frame import Frame


def make_solid_frame(width, height, color):
    pixels = np.empty((height, width, 4), dtype=np.uint8)
    pixels[:, :] = color
    return Frame(pixels)


class TestToPaletteImage:
    """Tests for the conversion of quantized frames to P mode."""

    def test_reserves_transparent_index(self):
        """Test that transparent pixels use a dedicated palette slot."""
        pixels = np.zeros((2, 2, 4), dtype=np.uint8)
        pixels[0, 0] = (255, 0, 0, 255)
        pixels[1, 1] = (0, 0, 255, 255)

        image, transparency = to_palette_image(Frame(pixels))

        assert image.mode == "P"
        assert transparency == 2
        assert image.getpixel((1, 0)) == 2
        assert image.convert("RGBA").getpixel((1, 1)) == (0, 0, 255, 255)

    def test_full_palette_without_transparency(self):
        """Test that 256 opaque colors fill the whole color table."""
        pixels = np.zeros((16, 16, 4), dtype=np.uint8)
        pixels[:, :, 0] = np.arange(256, dtype=np.uint8).reshape(16, 16)
        pixels[:, :, 3] = 255

        _, transparency = to_palette_image(Frame(pixels))

        assert transparency is None

    def test_too_many_entries(self):
        """Test that 256 colors plus transparency do not fit."""
        pixels = np.zeros((17, 16, 4), dtype=np.uint8)
        pixels[:16, :, 0] = np.arange(256, dtype=np.uint8).reshape(16, 16)
        pixels[:16, :, 3] = 255

        with pytest.raises(EncodingError, match="9 bpp"):
            to_palette_image(Frame(pixels))

    def test_partial_alpha_rejected(self):
        """Test that unquantized frames are rejected."""
        with pytest.raises(EncodingError, match="partially transparent"):
            to_palette_image(make_solid_frame(2, 2, (1, 2, 3, 128)))


class TestEncodeAnimation:
    """Tests for the GIF writer."""

    def test_stream_metadata(self, solid_config):
        """Test signature, frame count, loop and delays of an encoded stream."""
        data = encode_animation(solid_config)
        info = read_stream_info(data)

        assert data.startswith(GIF_SIGNATURE)
        assert data.endswith(b";")
        assert info.size == (4, 4)
        assert info.frame_count == 10
        assert info.loop == 0
        assert info.durations == [100] * 10

    def test_no_loop_extension(self, solid_config):
        """Test that LOOP=None omits the NETSCAPE extension."""
        data = encode_animation(solid_config, EncoderConfig(LOOP=None))

        assert b"NETSCAPE2.0" not in data
        assert read_stream_info(data).loop is None

    def test_identical_frames_are_kept(self):
        """Test that consecutive equal frames are not merged."""
        frame = make_solid_frame(3, 3, (10, 20, 30, 255))
        config = AnimationConfig.from_sequences([frame] * 3, [50, 50, 50])

        assert read_stream_info(encode_animation(config)).frame_count == 3

    def test_ping_pong_frames_written_back(self):
        """Test that ping-pong playback stores frames N-2 .. 1 after the forward pass."""
        colors = [(0, 0, 0, 255), (60, 0, 0, 255), (120, 0, 0, 255), (180, 0, 0, 255)]
        frames = [make_solid_frame(2, 2, color) for color in colors]
        config = AnimationConfig.from_sequences(
            frames, [100, 100, 100, 500], animation_mode=AnimationMode.PING_PONG
        )

        decoded = decode_animation(encode_animation(config))

        reds = [int(frame.pixels[0, 0, 0]) for frame in decoded.frames]
        assert reds == [0, 60, 120, 180, 120, 60]
        assert decoded.info.durations == [100, 100, 100, 500, 100, 100]

    def test_size_mismatch_is_fatal(self):
        """Test ERROR_IF_DIFFERS with frames of different sizes."""
        config = AnimationConfig.from_sequences(
            [make_solid_frame(4, 4, (0, 0, 0, 255)), make_solid_frame(5, 4, (0, 0, 0, 255))],
            [100, 100],
        )

        with pytest.raises(ReconciliationError):
            encode_animation(config)

    def test_first_frame_defines_logical_size(self):
        """Test that later frames are fitted to the first frame's size."""
        config = AnimationConfig.from_sequences(
            [make_solid_frame(6, 4, (0, 0, 0, 255)), make_solid_frame(2, 2, (0, 0, 255, 255))],
            [100, 100],
            size_handling=SizeHandling.CENTER,
        )

        decoded = decode_animation(encode_animation(config))

        assert decoded.info.size == (6, 4)
        assert all(frame.size == (6, 4) for frame in decoded.frames)
        assert tuple(decoded.frames[1].pixels[1, 2]) == (0, 0, 255, 255)
        assert tuple(decoded.frames[1].pixels[0, 0]) == (0, 0, 0, 0)

    def test_missing_delays(self, solid_frames):
        """Test that fewer delays than frames is a precondition violation."""
        config = AnimationConfig.from_sequences(solid_frames, [100] * 3)

        with pytest.raises(ValidationError):
            encode_animation(config)

    def test_no_frames(self):
        """Test that an empty animation cannot be encoded."""
        with pytest.raises(ValidationError):
            encode_animation(AnimationConfig.from_sequences([], []))

    def test_extra_delays_warn(self, solid_frames, caplog):
        """Test that surplus delays are ignored with a warning."""
        config = AnimationConfig.from_sequences(solid_frames, [100] * 12)

        with caplog.at_level(logging.WARNING, logger="gifconform.codec"):
            data = encode_animation(config)

        assert read_stream_info(data).frame_count == 10
        assert "Delay sequence is longer" in caplog.text

    def test_wipe_frame_count(self, small_wipe):
        """Test that every wipe frame ends up in the stream."""
        info = read_stream_info(encode_animation(small_wipe.animation_config()))

        assert info.frame_count == 6
        assert info.size == (12, 6)
        assert info.durations[-1] == 3000


class TestLocalColorTable:
    """Tests for the color table size of written frames."""

    def test_table_holds_every_index(self):
        """Test that six colors plus transparency fit the written table."""
        pixels = np.zeros((1, 7, 4), dtype=np.uint8)
        pixels[0, :6, 0] = [0, 40, 80, 120, 160, 200]
        pixels[0, :6, 3] = 255
        config = AnimationConfig.from_sequences([Frame(pixels)], [100])

        data = encode_animation(config, EncoderConfig(LOOP=None))

        # Signature and logical screen descriptor take 13 bytes
        assert _local_table_entries(data[13:]) >= 8

    def test_malformed_block_rejected(self):
        """Test that a block without an image descriptor is an encoding error."""
        with pytest.raises(EncodingError):
            _local_table_entries(b"GIF89a;")


class TestDecodeAnimation:
    """Tests for the GIF reader."""

    def test_transparent_pixels_normalized(self):
        """Test that fully transparent pixels decode as (0, 0, 0, 0)."""
        pixels = np.zeros((2, 2, 4), dtype=np.uint8)
        pixels[0, 0] = (200, 100, 50, 255)
        pixels[1, 1] = (90, 90, 90, 10)
        config = AnimationConfig.from_sequences([Frame(pixels)], [100])

        decoded = decode_animation(encode_animation(config))

        frame = decoded.frames[0]
        assert tuple(frame.pixels[0, 0]) == (200, 100, 50, 255)
        assert tuple(frame.pixels[1, 1]) == (0, 0, 0, 0)
        assert tuple(frame.pixels[0, 1]) == (0, 0, 0, 0)

    def test_frames_are_owned_and_releasable(self, solid_config):
        """Test that release drops every decoded frame."""
        decoded = decode_animation(encode_animation(solid_config))

        assert not any(frame.transient for frame in decoded.frames)
        decoded.release()
        assert all(frame.is_released for frame in decoded.frames)

    def test_garbage_raises_decoding_error(self):
        """Test that unreadable bytes are wrapped into DecodingError."""
        with pytest.raises(DecodingError) as exc_info:
            decode_animation(b"definitely not an image")

        assert exc_info.value.cause is not None

    def test_non_gif_rejected(self):
        """Test that other image formats are rejected."""
        buffer = BytesIO()
        Image.new("RGB", (2, 2)).save(buffer, format="PNG")

        with pytest.raises(DecodingError, match="not a GIF"):
            read_stream_info(buffer.getvalue())

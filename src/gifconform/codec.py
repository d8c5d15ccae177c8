"""GIF encoder and decoder used as the round-trip collaborators.

The encoder writes every frame at full logical-screen size with its own local
color table, a reserved transparent index and "restore to background"
disposal. Unlike ``Image.save(save_all=True)`` it never merges identical
consecutive frames or crops frames to their changed region, so the decoded
frame count is exactly what the playback mode promises. The LZW-compressed
image blocks come from Pillow's GIF plugin helpers.

Ping-pong playback is stored explicitly: after the forward pass the frames
``N-2 .. 1`` are written again in reverse order.
"""

from __future__ import annotations

import logging
import struct
from dataclasses import dataclass, field
from io import BytesIO

import numpy as np
from PIL import GifImagePlugin, Image, ImageSequence

from .animation import AnimationConfig, AnimationMode
from .config import DEFAULT_ENCODER_CONFIG, EncoderConfig
from .error_handling import (
    DecodingError,
    EncodingError,
    ValidationError,
    error_context,
    log_warning_with_context,
)
from .frame import Frame
from .pixels import bits_per_pixel, round_up_to_power_of_2
from .quantizers import reduce_frame
from .size_handling import place_frame

logger = logging.getLogger(__name__)

GIF_SIGNATURE = b"GIF89a"
GIF_TRAILER = b";"
# A color table holds 2 ** bpp entries with bpp at most 8
MAX_BITS_PER_PIXEL = 8
MAX_COLOR_TABLE_ENTRIES = 1 << MAX_BITS_PER_PIXEL

# Graphic control extension and image descriptor as written for every frame
GRAPHIC_CONTROL_SIZE = 8
IMAGE_DESCRIPTOR_SIZE = 10
IMAGE_SEPARATOR = b","
LOCAL_TABLE_FLAG = 0x80

# Disposal method 2: restore the frame area to the background before the next frame
DISPOSE_TO_BACKGROUND = 2


@dataclass
class GifStreamInfo:
    """Metadata of an encoded GIF stream."""

    width: int
    height: int
    frame_count: int
    loop: int | None = None
    durations: list[int] = field(default_factory=list)

    @property
    def size(self) -> tuple[int, int]:
        return (self.width, self.height)


@dataclass
class DecodedAnimation:
    """Owned RGBA frames of a decoded stream plus its metadata."""

    info: GifStreamInfo
    frames: list[Frame]

    def release(self) -> None:
        for frame in self.frames:
            frame.release()


def to_palette_image(frame: Frame) -> tuple[Image.Image, int | None]:
    """Convert a quantized frame into a ``P`` mode image without re-quantizing.

    Args:
        frame: Frame whose pixels are fully opaque or fully transparent

    Returns:
        ``(image, transparency_index)``; the index is ``None`` only when all
        256 table entries are taken by opaque colors

    Raises:
        EncodingError: If the frame has partial alpha or too many colors
    """
    pixels = frame.pixels
    alpha = pixels[:, :, 3]
    if np.any((alpha != 0) & (alpha != 255)):
        raise EncodingError("Frame has partially transparent pixels; quantize it first")

    visible = alpha == 255
    unique, inverse = np.unique(pixels[visible][:, :3], axis=0, return_inverse=True)
    inverse = inverse.reshape(-1)
    has_hidden = not bool(visible.all())

    entries = len(unique) + (1 if len(unique) < MAX_COLOR_TABLE_ENTRIES or has_hidden else 0)
    bpp = bits_per_pixel(entries)
    if bpp > MAX_BITS_PER_PIXEL:
        raise EncodingError(
            f"Frame needs {entries} color table entries ({bpp} bpp), a GIF frame holds at most "
            f"{MAX_COLOR_TABLE_ENTRIES}",
            context={"opaque_colors": len(unique), "has_transparency": has_hidden},
        )

    transparency = len(unique) if len(unique) < MAX_COLOR_TABLE_ENTRIES else None
    indices = np.zeros(alpha.shape, dtype=np.uint8)
    indices[visible] = inverse
    if transparency is not None:
        indices[~visible] = transparency

    palette = unique.astype(np.uint8).tolist()
    if transparency is not None:
        palette.append([0, 0, 0])

    image = Image.frombytes("P", frame.size, indices.tobytes())
    image.putpalette([channel for color in palette for channel in color])
    logger.debug(f"Palette frame: {len(palette)} entries, {bpp} bpp")
    return image, transparency


def _global_header(size: tuple[int, int], loop: int | None) -> bytes:
    # Logical screen descriptor without a global color table
    header = GIF_SIGNATURE + struct.pack("<HHBBB", size[0], size[1], 0, 0, 0)
    if loop is not None:
        header += b"!\xff\x0bNETSCAPE2.0\x03\x01" + struct.pack("<H", loop) + b"\x00"
    return header


def _frame_block(image: Image.Image, transparency: int | None, delay_ms: int) -> bytes:
    params = {
        "duration": delay_ms,
        "disposal": DISPOSE_TO_BACKGROUND,
        "include_color_table": True,
    }
    if transparency is not None:
        params["transparency"] = transparency
    block = b"".join(bytes(chunk) for chunk in GifImagePlugin.getdata(image, (0, 0), **params))

    # Every index used by the frame must address an entry of the local table
    highest_index = image.getextrema()[1]
    required = round_up_to_power_of_2(highest_index + 1)
    written = _local_table_entries(block)
    if written < required:
        raise EncodingError(
            f"Local color table holds {written} entries, frame indices need {required}",
            context={"highest_index": highest_index},
        )
    return block


def _local_table_entries(block: bytes) -> int:
    """Size of the local color table declared by an encoded frame block."""
    descriptor = block[GRAPHIC_CONTROL_SIZE : GRAPHIC_CONTROL_SIZE + IMAGE_DESCRIPTOR_SIZE]
    if len(descriptor) != IMAGE_DESCRIPTOR_SIZE or descriptor[:1] != IMAGE_SEPARATOR:
        raise EncodingError(
            "Frame block does not start with a graphic control extension and image descriptor"
        )

    flags = descriptor[-1]
    if not flags & LOCAL_TABLE_FLAG:
        return 0
    return 1 << ((flags & 0x07) + 1)


def encode_animation(
    config: AnimationConfig, encoder_config: EncoderConfig = DEFAULT_ENCODER_CONFIG
) -> bytes:
    """Encode the frames of *config* into an animated GIF.

    The frame sequence is traversed once, and each frame is fully processed
    before the next one is requested. The first frame defines the logical
    screen size; other frames are fitted according to ``config.size_handling``.

    Args:
        config: Animation to encode
        encoder_config: Loop count and resampling settings

    Returns:
        The encoded GIF stream

    Raises:
        ValidationError: If there are no frames or fewer delays than frames
        ReconciliationError: If frame sizes differ under ERROR_IF_DIFFERS
        EncodingError: If a frame cannot be represented in a GIF
    """
    quantizer = config.effective_quantizer
    out = BytesIO()
    blocks: list[bytes] = []
    logical_size: tuple[int, int] | None = None
    delays = iter(config.delays())
    frame_count = 0

    with error_context("encode animation", EncodingError, context={"quantizer": quantizer.NAME}):
        for index, frame in enumerate(config.frames()):
            delay = next(delays, None)
            if delay is None:
                raise ValidationError(
                    f"Delay sequence ended before frame #{index}",
                    context={"frame_index": index},
                )

            if logical_size is None:
                logical_size = frame.size
                out.write(_global_header(logical_size, encoder_config.LOOP))

            placed = place_frame(frame, logical_size, config.size_handling, encoder_config.RESAMPLING)
            reduced = reduce_frame(placed, quantizer, config.ditherer)
            image, transparency = to_palette_image(reduced)
            block = _frame_block(image, transparency, int(delay))
            out.write(block)
            frame_count += 1
            if config.animation_mode is AnimationMode.PING_PONG:
                blocks.append(block)

        if logical_size is None:
            raise ValidationError("Cannot encode an animation without frames")

        if next(delays, None) is not None:
            log_warning_with_context(
                "Delay sequence is longer than the frame sequence; extra delays ignored",
                context={"frame_count": frame_count},
                logger=logger,
            )

        for block in reversed(blocks[1:-1]):
            out.write(block)

        out.write(GIF_TRAILER)

    logger.info(
        f"Encoded {frame_count} source frames ({config.animation_mode.value}) "
        f"into {out.tell()} bytes at {logical_size[0]}x{logical_size[1]}"
    )
    return out.getvalue()


def _open_gif(data: bytes) -> Image.Image:
    image = Image.open(BytesIO(data))
    if image.format != "GIF":
        image.close()
        raise DecodingError(f"Stream is not a GIF (detected {image.format})")
    return image


def read_stream_info(data: bytes) -> GifStreamInfo:
    """Read size, frame count, loop count and delays without keeping pixels."""
    with error_context("read GIF stream info", DecodingError, context={"bytes": len(data)}):
        with _open_gif(data) as image:
            durations = [
                int(frame.info.get("duration", 0)) for frame in ImageSequence.Iterator(image)
            ]
            return GifStreamInfo(
                width=image.width,
                height=image.height,
                frame_count=len(durations),
                loop=image.info.get("loop"),
                durations=durations,
            )


def decode_animation(data: bytes) -> DecodedAnimation:
    """Decode every frame of a GIF stream into owned RGBA frames.

    Fully transparent pixels are normalized to ``(0, 0, 0, 0)``, matching the
    output of the quantizers.
    """
    frames: list[Frame] = []
    durations: list[int] = []

    with error_context("decode GIF stream", DecodingError, context={"bytes": len(data)}):
        with _open_gif(data) as image:
            loop = image.info.get("loop")
            for frame in ImageSequence.Iterator(image):
                rgba = np.array(frame.convert("RGBA"), dtype=np.uint8)
                rgba[rgba[:, :, 3] == 0] = 0
                frames.append(Frame(rgba))
                durations.append(int(frame.info.get("duration", 0)))
            size = image.size

    info = GifStreamInfo(
        width=size[0],
        height=size[1],
        frame_count=len(frames),
        loop=loop,
        durations=durations,
    )
    logger.debug(f"Decoded {info.frame_count} frames at {info.width}x{info.height}")
    return DecodedAnimation(info=info, frames=frames)

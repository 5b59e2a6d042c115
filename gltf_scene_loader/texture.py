#
# PROJECT: gltf-scene-loader
# MODULE: gltf_scene_loader/texture.py
# STATUS: Level 2 - Implementation
# LOG_REF: 2026-10-19
#

import io
from dataclasses import dataclass, field

import numpy as np
from PIL import Image

from .errors import TextureDecodeError

# Pillow mode -> bytes per pixel
CHANNELS = {'L': 1, 'RGB': 3, 'RGBA': 4}

RED, GREEN, BLUE, ALPHA = 0, 1, 2, 3


@dataclass(frozen=True)
class Texture:
    """
    Immutable decoded pixel buffer, 8 bits per channel, rows top to bottom.

    ``mode`` is one of 'RGB', 'RGBA' or 'L' (a single extracted channel).
    Two textures compare equal when their size, mode and pixels match.
    """
    width: int
    height: int
    mode: str
    data: bytes = field(repr=False)

    @property
    def channels(self) -> int:
        return CHANNELS[self.mode]

    def pixel(self, x: int, y: int) -> tuple:
        """Channel values (0-255) of the pixel at column x, row y."""
        n = self.channels
        start = (y * self.width + x) * n
        return tuple(self.data[start:start + n])

    def sample(self, u: float, v: float) -> tuple:
        """Nearest pixel for a texture coordinate in [0, 1] x [0, 1]."""
        return self.pixel(int(u * self.width), int(v * self.height))

    @classmethod
    def from_image(cls, image: Image.Image, mode: str) -> 'Texture':
        if image.mode.startswith('I'):
            image = _to_8bit(image)
        if image.mode != mode:
            image = image.convert(mode)
        width, height = image.size
        return cls(width, height, mode, image.tobytes())

    def to_image(self) -> Image.Image:
        return Image.frombytes(self.mode, (self.width, self.height), self.data)

    def extract_channel(self, channel: int) -> 'Texture':
        """Single-channel copy of one of this texture's channels."""
        if not 0 <= channel < self.channels:
            raise ValueError(f"{self.mode} texture has no channel {channel}")
        if self.mode == 'L':
            return self
        return Texture.from_image(self.to_image().getchannel(channel), 'L')


def _to_8bit(image: Image.Image) -> Image.Image:
    """Gray image with 16-bit samples (modes I;16*, I) as 8-bit L."""
    samples = np.clip(np.asarray(image, dtype=np.int64), 0, 65535)
    return Image.fromarray((samples >> 8).astype(np.uint8))


def decode_image(data: bytes, texture_index: int) -> Image.Image:
    """Decode encoded image bytes (PNG, JPEG, ...) with Pillow."""
    try:
        image = Image.open(io.BytesIO(data))
        image.load()
    except (OSError, ValueError, Image.DecompressionBombError) as exc:
        raise TextureDecodeError(texture_index, exc) from exc
    return image

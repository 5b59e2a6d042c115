#
# PROJECT: gltf-scene-loader
# MODULE: gltf_scene_loader/cache.py
# STATUS: Level 2 - Implementation
# LOG_REF: 2026-10-19
#

import logging
from typing import Optional

from .document import GltfSource
from .texture import Texture, decode_image

logger = logging.getLogger(__name__)


class ResourceCache:
    """
    Per-load pools of materials and decoded textures.

    Every entry is keyed by its index in the source document, so that each
    material and each (texture, pixel layout) pair is built at most once and
    handed out as the same shared instance afterwards. Single-channel
    extractions are keyed by (texture index, channel): the metallic and
    roughness images of one packed texture are two entries.

    Owned by one load call; not safe for concurrent use.
    """

    def __init__(self, source: GltfSource, load_images: bool = True):
        self.source = source
        self.load_images = load_images
        self.materials = {}
        self.rgb_images = {}
        self.rgba_images = {}
        self.gray_images = {}
        self.hits = 0
        self.misses = 0

    def _lookup(self, pool: dict, key):
        image = pool.get(key)
        if image is not None:
            self.hits += 1
            logger.debug("texture cache hit %r", key)
        return image

    def _store(self, pool: dict, key, image: Texture) -> Texture:
        self.misses += 1
        pool[key] = image
        logger.debug("decoded texture %r: %dx%d %s", key, image.width, image.height, image.mode)
        return image

    def _decode(self, texture_index: int):
        texture = self.source.texture(texture_index)
        if texture.source is None:
            logger.warning("texture %d has no image source, ignored", texture_index)
            return None
        data = self.source.image_bytes(texture.source)
        return decode_image(data, texture_index)

    def load_rgb_image(self, texture_index: int) -> Optional[Texture]:
        """RGB decode, used by normal and emissive textures."""
        if not self.load_images:
            return None
        image = self._lookup(self.rgb_images, texture_index)
        if image is not None:
            return image
        decoded = self._decode(texture_index)
        if decoded is None:
            return None
        return self._store(self.rgb_images, texture_index, Texture.from_image(decoded, 'RGB'))

    def load_base_color_image(self, texture_index: int) -> Optional[Texture]:
        """RGBA decode, used by base color textures."""
        if not self.load_images:
            return None
        image = self._lookup(self.rgba_images, texture_index)
        if image is not None:
            return image
        decoded = self._decode(texture_index)
        if decoded is None:
            return None
        return self._store(self.rgba_images, texture_index, Texture.from_image(decoded, 'RGBA'))

    def load_gray_image(self, texture_index: int, channel: int) -> Optional[Texture]:
        """One channel (0=R, 1=G, 2=B) of the RGBA decode of a texture."""
        if not self.load_images:
            return None
        key = (texture_index, channel)
        image = self._lookup(self.gray_images, key)
        if image is not None:
            return image
        decoded = self._decode(texture_index)
        if decoded is None:
            return None
        rgba = Texture.from_image(decoded, 'RGBA')
        return self._store(self.gray_images, key, rgba.extract_channel(channel))

#
# PROJECT: gltf-scene-loader
# MODULE: gltf_scene_loader/loader.py
# STATUS: Level 2 - Implementation
# LOG_REF: 2026-10-19
#

import logging
from typing import List, Optional

from .cache import ResourceCache
from .config import LoadConfig
from .document import GltfSource
from .scene import Scene, load_scene

logger = logging.getLogger(__name__)


def load(path, config: Optional[LoadConfig] = None) -> List[Scene]:
    """
    Load every scene of a ``.gltf`` or ``.glb`` file.

    Raises LoadIOError if the file (or a resource it references) cannot be
    read, DocumentParseError if it is not a valid document, and the other
    LoadError subclasses for unusable content. Nothing is returned on
    failure.
    """
    return load_source(GltfSource.open(path), config)


def load_source(source: GltfSource, config: Optional[LoadConfig] = None) -> List[Scene]:
    """Load every scene of an already-parsed document.

    One ResourceCache is shared by all scenes, so a material or texture used
    in several scenes is still built once.
    """
    config = config or LoadConfig()
    cache = ResourceCache(source, load_images=config.load_images)
    scenes = [load_scene(gltf_scene, cache, config) for gltf_scene in source.gltf.scenes or []]
    logger.info("loaded %d scene(s), %d material(s), %d texture decode(s), %d cache hit(s)",
                len(scenes), len(cache.materials), cache.misses, cache.hits)
    return scenes

#
# PROJECT: gltf-scene-loader
# MODULE: gltf_scene_loader/config.py
# STATUS: Level 2 - Implementation
# LOG_REF: 2026-10-19
#

import os
from dataclasses import dataclass

_TRUTHY = ('1', 'true', 'yes', 'on')


def _env_flag(name: str) -> bool:
    return os.environ.get(name, '').strip().lower() in _TRUTHY


@dataclass
class LoadConfig:
    """Optional parts of a document to extract.

    The data model always carries every field; switching a feature off
    leaves the field at its empty value (None, {} or a zero vector).
    """
    load_images: bool = True
    load_names: bool = True
    load_extras: bool = False
    vertex_colors: bool = True

    @classmethod
    def from_env(cls) -> 'LoadConfig':
        """
        Build a config from environment variables.

        GLTF_SCENE_NO_IMAGES, GLTF_SCENE_NO_NAMES, GLTF_SCENE_EXTRAS and
        GLTF_SCENE_NO_COLORS accept 1/true/yes/on.
        """
        return cls(
            load_images=not _env_flag('GLTF_SCENE_NO_IMAGES'),
            load_names=not _env_flag('GLTF_SCENE_NO_NAMES'),
            load_extras=_env_flag('GLTF_SCENE_EXTRAS'),
            vertex_colors=not _env_flag('GLTF_SCENE_NO_COLORS'),
        )

    def name_of(self, obj):
        """Name of a glTF object if names are enabled."""
        if not self.load_names:
            return None
        return getattr(obj, 'name', None)

    def extras_of(self, obj) -> dict:
        if not self.load_extras:
            return {}
        extras = getattr(obj, 'extras', None)
        return dict(extras) if isinstance(extras, dict) else {}

#
# PROJECT: gltf-scene-loader
# MODULE: gltf_scene_loader/light.py
# STATUS: Level 2 - Implementation
# LOG_REF: 2026-10-19
#
"""KHR_lights_punctual lights, frozen in world space at extraction time."""

import logging
import math
from dataclasses import dataclass, field
from typing import Optional, Union

from .config import LoadConfig
from .math_utils import Mat4, Vec3

logger = logging.getLogger(__name__)


def _white():
    return Vec3(1.0, 1.0, 1.0)


@dataclass(frozen=True)
class DirectionalLight:
    """Infinitely distant light shining along ``direction``; intensity in lux."""
    direction: Vec3
    color: Vec3 = field(default_factory=_white)
    intensity: float = 1.0
    name: Optional[str] = None
    kind = 'directional'


@dataclass(frozen=True)
class PointLight:
    """Light emitting in all directions from ``position``; intensity in candela."""
    position: Vec3
    color: Vec3 = field(default_factory=_white)
    intensity: float = 1.0
    name: Optional[str] = None
    kind = 'point'


@dataclass(frozen=True)
class SpotLight:
    """
    Cone of light from ``position`` along ``direction``; intensity in candela.

    Intensity applies inside ``inner_cone_angle`` and falls off up to
    ``outer_cone_angle`` (both radians, from the cone axis).
    """
    position: Vec3
    direction: Vec3
    color: Vec3 = field(default_factory=_white)
    intensity: float = 1.0
    inner_cone_angle: float = 0.0
    outer_cone_angle: float = math.pi / 4
    name: Optional[str] = None
    kind = 'spot'


Light = Union[DirectionalLight, PointLight, SpotLight]


def load_light(gltf_light: dict, transform: Mat4,
               config: Optional[LoadConfig] = None) -> Optional[Light]:
    """
    Light for a KHR_lights_punctual definition on a node with world matrix
    ``transform``. Returns None for an unknown light type.
    """
    config = config or LoadConfig()
    name = gltf_light.get('name') if config.load_names else None
    color = Vec3(*gltf_light.get('color', (1.0, 1.0, 1.0)))
    intensity = float(gltf_light.get('intensity', 1.0))
    kind = gltf_light.get('type')

    position = transform.translation_part()
    direction = -transform.axis(2).normalize()

    if kind == 'directional':
        return DirectionalLight(direction, color, intensity, name)
    if kind == 'point':
        return PointLight(position, color, intensity, name)
    if kind == 'spot':
        spot = gltf_light.get('spot') or {}
        return SpotLight(
            position, direction, color, intensity,
            inner_cone_angle=float(spot.get('innerConeAngle', 0.0)),
            outer_cone_angle=float(spot.get('outerConeAngle', math.pi / 4)),
            name=name,
        )
    logger.warning("unknown light type %r ignored", kind)
    return None

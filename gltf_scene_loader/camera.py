#
# PROJECT: gltf-scene-loader
# MODULE: gltf_scene_loader/camera.py
# STATUS: Level 2 - Implementation
# LOG_REF: 2026-10-19
#

import math
from dataclasses import dataclass, field
from typing import Optional, Union

from .config import LoadConfig
from .errors import DocumentParseError
from .math_utils import Mat4, Vec2, Vec3


@dataclass(frozen=True)
class Perspective:
    yfov: float = 0.399             # radians
    aspect_ratio: Optional[float] = None


@dataclass(frozen=True)
class Orthographic:
    scale: Vec2 = field(default_factory=lambda: Vec2(1.0, 1.0))   # (xmag, ymag)


Projection = Union[Perspective, Orthographic]


class Camera:
    """
    World-space camera extracted from a node.

    ``transform`` is the node's world matrix (camera to world). The camera
    looks down its local -Z axis, so ``forward()`` is the negated third
    column.
    """
    __slots__ = ('transform', 'projection', 'znear', 'zfar', 'name', 'extras')

    def __init__(self, transform: Mat4 = None, projection: Projection = None,
                 znear: float = 0.0, zfar: float = math.inf,
                 name: Optional[str] = None, extras: dict = None):
        self.transform = transform if transform is not None else Mat4.identity()
        self.projection = projection if projection is not None else Perspective()
        self.znear = znear
        self.zfar = zfar
        self.name = name
        self.extras = extras or {}

    def __repr__(self):
        return (f"Camera(position={self.position()!r}, projection={self.projection!r}, "
                f"znear={self.znear}, zfar={self.zfar})")

    def position(self) -> Vec3:
        return self.transform.translation_part()

    def right(self) -> Vec3:
        return self.transform.axis(0).normalize()

    def up(self) -> Vec3:
        return self.transform.axis(1).normalize()

    def forward(self) -> Vec3:
        return -self.transform.axis(2).normalize()

    def apply_transform_vector(self, v) -> Vec3:
        """Rotate/scale a camera-space direction into world space."""
        return self.transform.transform_vector(v)


def load_camera(gltf_cam, transform: Mat4, config: Optional[LoadConfig] = None) -> Camera:
    """Camera for a glTF camera attached to a node with world matrix ``transform``."""
    config = config or LoadConfig()
    name = config.name_of(gltf_cam)
    extras = config.extras_of(gltf_cam)

    if gltf_cam.type == 'orthographic' and gltf_cam.orthographic is not None:
        ortho = gltf_cam.orthographic
        return Camera(
            transform=transform,
            projection=Orthographic(Vec2(ortho.xmag, ortho.ymag)),
            znear=float(ortho.znear),
            zfar=float(ortho.zfar),
            name=name,
            extras=extras,
        )

    pers = gltf_cam.perspective
    if pers is None:
        raise DocumentParseError(f"camera has no {gltf_cam.type!r} projection")
    zfar = math.inf if pers.zfar is None else float(pers.zfar)
    return Camera(
        transform=transform,
        projection=Perspective(float(pers.yfov), pers.aspectRatio),
        znear=float(pers.znear or 0.0),
        zfar=zfar,
        name=name,
        extras=extras,
    )

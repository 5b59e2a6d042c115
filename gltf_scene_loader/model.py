#
# PROJECT: gltf-scene-loader
# MODULE: gltf_scene_loader/model.py
# STATUS: Level 2 - Implementation
# LOG_REF: 2026-10-19
#

import logging
from dataclasses import dataclass, field
from enum import IntEnum
from typing import List, Optional, Tuple

from .cache import ResourceCache
from .config import LoadConfig
from .errors import BadModeError, DocumentParseError, MissingAttributeError
from .material import Material, load_material
from .math_utils import Mat4, Vec2, Vec3, Vec4

logger = logging.getLogger(__name__)


class Mode(IntEnum):
    """Primitive topology, numbered as in glTF."""
    POINTS = 0
    LINES = 1
    LINE_LOOP = 2
    LINE_STRIP = 3
    TRIANGLES = 4
    TRIANGLE_STRIP = 5
    TRIANGLE_FAN = 6


TRIANGLE_MODES = (Mode.TRIANGLES, Mode.TRIANGLE_STRIP, Mode.TRIANGLE_FAN)
LINE_MODES = (Mode.LINES, Mode.LINE_STRIP, Mode.LINE_LOOP)


@dataclass
class Vertex:
    """World-space vertex. Attributes missing from the source stay zero."""
    position: Vec3 = field(default_factory=Vec3)
    normal: Vec3 = field(default_factory=Vec3)
    tangent: Vec4 = field(default_factory=Vec4)
    tex_coords: Vec2 = field(default_factory=Vec2)
    color: Vec4 = field(default_factory=Vec4)


Triangle = Tuple[Vertex, Vertex, Vertex]
Line = Tuple[Vertex, Vertex]


class Model:
    """
    Geometry of one mesh primitive, ready to draw with ``material``.

    Either draw ``vertices`` with ``indices`` yourself according to ``mode``,
    or use ``triangles()``, ``lines()`` or ``points()``, whichever matches it.
    """

    def __init__(self, vertices: List[Vertex], indices: Optional[List[int]] = None,
                 mode: Mode = Mode.TRIANGLES, material: Material = None,
                 has_normals: bool = False, has_tangents: bool = False,
                 has_tex_coords: bool = False, has_colors: bool = False,
                 mesh_name: Optional[str] = None, primitive_index: int = 0,
                 extras: dict = None):
        self.vertices = vertices
        self.indices = indices
        self.mode = Mode(mode)
        self.material = material
        self.mesh_name = mesh_name
        self.primitive_index = primitive_index
        self.extras = extras or {}
        self._has_normals = has_normals
        self._has_tangents = has_tangents
        self._has_tex_coords = has_tex_coords
        self._has_colors = has_colors

    def __repr__(self):
        return (f"Model(mesh={self.mesh_name!r}, primitive={self.primitive_index}, "
                f"mode={self.mode.name}, vertices={len(self.vertices)})")

    def has_normals(self) -> bool:
        return self._has_normals

    def has_tangents(self) -> bool:
        return self._has_tangents

    def has_tex_coords(self) -> bool:
        return self._has_tex_coords

    def has_colors(self) -> bool:
        return self._has_colors

    def _index_list(self) -> List[int]:
        if self.indices is None:
            return list(range(len(self.vertices)))
        return self.indices

    def _truncated(self, indices: List[int], stride: int) -> List[int]:
        extra = len(indices) % stride
        if extra:
            logger.warning("%s index list of length %d is not a multiple of %d; "
                           "dropping the last %d index(es)",
                           self.mode.name, len(indices), stride, extra)
            return indices[:len(indices) - extra]
        return indices

    def triangles(self) -> List[Triangle]:
        """Triangles for TRIANGLES, TRIANGLE_STRIP and TRIANGLE_FAN models."""
        if self.mode not in TRIANGLE_MODES:
            raise BadModeError(self.mode, TRIANGLE_MODES)
        v = self.vertices
        indices = self._index_list()

        if self.mode == Mode.TRIANGLES:
            indices = self._truncated(indices, 3)
            return [(v[indices[i]], v[indices[i + 1]], v[indices[i + 2]])
                    for i in range(0, len(indices), 3)]

        if self.mode == Mode.TRIANGLE_STRIP:
            # Every odd triangle swaps its first two corners to keep the winding.
            return [(v[indices[i + i % 2]], v[indices[i + 1 - i % 2]], v[indices[i + 2]])
                    for i in range(len(indices) - 2)]

        return [(v[indices[0]], v[indices[i]], v[indices[i + 1]])
                for i in range(1, len(indices) - 1)]

    def lines(self) -> List[Line]:
        """Segments for LINES, LINE_STRIP and LINE_LOOP models."""
        if self.mode not in LINE_MODES:
            raise BadModeError(self.mode, LINE_MODES)
        v = self.vertices
        indices = self._index_list()

        if self.mode == Mode.LINES:
            indices = self._truncated(indices, 2)
            return [(v[indices[i]], v[indices[i + 1]])
                    for i in range(0, len(indices), 2)]

        lines = [(v[indices[i]], v[indices[i + 1]]) for i in range(len(indices) - 1)]
        if self.mode == Mode.LINE_LOOP and indices:
            lines.append((v[indices[-1]], v[indices[0]]))
        return lines

    def points(self) -> List[Vertex]:
        """The raw vertex list of a POINTS model."""
        if self.mode != Mode.POINTS:
            raise BadModeError(self.mode, (Mode.POINTS,))
        return self.vertices


def load_model(primitive, transform: Mat4, cache: ResourceCache,
               config: Optional[LoadConfig] = None,
               mesh_name: Optional[str] = None, primitive_index: int = 0) -> Model:
    """Build a Model from a glTF primitive on a node with world matrix ``transform``."""
    config = config or LoadConfig()
    source = cache.source
    attributes = primitive.attributes

    indices = None
    if primitive.indices is not None:
        indices = source.read_indices(primitive.indices)

    position_accessor = getattr(attributes, 'POSITION', None)
    if position_accessor is None:
        raise MissingAttributeError('POSITION', mesh_name, primitive_index)
    try:
        vertices = [Vertex(position=transform.transform_point(p))
                    for p in source.read_floats(position_accessor).tolist()]
    except ValueError as exc:
        raise DocumentParseError(f"degenerate node transform: {exc}") from exc
    if indices and max(indices) >= len(vertices):
        raise DocumentParseError(
            f"index {max(indices)} out of range for {len(vertices)} vertices")

    has_normals = False
    normal_accessor = getattr(attributes, 'NORMAL', None)
    if normal_accessor is not None:
        for vertex, n in zip(vertices, source.read_floats(normal_accessor).tolist()):
            vertex.normal = transform.transform_vector(n).normalize()
        has_normals = True

    has_tangents = False
    tangent_accessor = getattr(attributes, 'TANGENT', None)
    if tangent_accessor is not None:
        for vertex, t in zip(vertices, source.read_floats(tangent_accessor).tolist()):
            xyz = transform.transform_vector(t).normalize()
            vertex.tangent = Vec4(xyz.x, xyz.y, xyz.z, t[3] if len(t) > 3 else 1.0)
        has_tangents = True

    has_tex_coords = False
    texcoord_accessor = getattr(attributes, 'TEXCOORD_0', None)
    if texcoord_accessor is not None:
        for vertex, uv in zip(vertices, source.read_floats(texcoord_accessor).tolist()):
            vertex.tex_coords = Vec2(uv[0], uv[1])
        has_tex_coords = True

    has_colors = False
    color_accessor = getattr(attributes, 'COLOR_0', None)
    if config.vertex_colors and color_accessor is not None:
        for vertex, c in zip(vertices, source.read_floats(color_accessor).tolist()):
            vertex.color = Vec4(c[0], c[1], c[2], c[3] if len(c) > 3 else 1.0)
        has_colors = True

    try:
        mode = Mode.TRIANGLES if primitive.mode is None else Mode(primitive.mode)
    except ValueError as exc:
        raise DocumentParseError(f"unknown primitive mode {primitive.mode}") from exc
    material = load_material(primitive.material, cache, config)

    return Model(
        vertices, indices, mode, material,
        has_normals=has_normals,
        has_tangents=has_tangents,
        has_tex_coords=has_tex_coords,
        has_colors=has_colors,
        mesh_name=mesh_name,
        primitive_index=primitive_index,
        extras=config.extras_of(primitive),
    )

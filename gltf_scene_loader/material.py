#
# PROJECT: gltf-scene-loader
# MODULE: gltf_scene_loader/material.py
# STATUS: Level 2 - Implementation
# LOG_REF: 2026-10-19
#

import logging
from dataclasses import dataclass, field
from typing import Optional

from .cache import ResourceCache
from .config import LoadConfig
from .math_utils import Vec2, Vec3, Vec4
from .texture import RED, GREEN, BLUE, Texture

logger = logging.getLogger(__name__)

GAMMA = 2.2


def _or(value, default):
    return default if value is None else value


@dataclass(frozen=True)
class PbrMaterial:
    """
    Metallic-roughness parameters.

    ``base_color_factor`` is linear RGBA; ``base_color_texture`` holds sRGB
    RGBA pixels. ``metallic_texture`` and ``roughness_texture`` are the blue
    and green channels of the packed metallic-roughness texture.
    """
    base_color_factor: Vec4 = field(default_factory=lambda: Vec4(1.0, 1.0, 1.0, 1.0))
    base_color_texture: Optional[Texture] = None
    metallic_factor: float = 0.0
    metallic_texture: Optional[Texture] = None
    roughness_factor: float = 0.0
    roughness_texture: Optional[Texture] = None


@dataclass(frozen=True)
class NormalMap:
    """Tangent-space normal texture (linear RGB) and its scale."""
    texture: Texture
    factor: float = 1.0


@dataclass(frozen=True)
class Occlusion:
    """Occlusion texture (red channel) and its strength."""
    texture: Texture
    factor: float = 1.0


@dataclass(frozen=True)
class Emissive:
    factor: Vec3 = field(default_factory=Vec3)
    texture: Optional[Texture] = None


@dataclass(frozen=True)
class Material:
    """
    Surface description shared by every model drawn with the same source
    material.

    The ``get_*`` helpers evaluate the material at a texture coordinate in
    [0, 1] x [0, 1] using the nearest texel; coordinates outside that range
    are not supported.
    """
    pbr: PbrMaterial = field(default_factory=PbrMaterial)
    normal: Optional[NormalMap] = None
    occlusion: Optional[Occlusion] = None
    emissive: Emissive = field(default_factory=Emissive)
    alpha_cutoff: float = 0.5
    alpha_mode: str = 'OPAQUE'
    double_sided: bool = False
    name: Optional[str] = None
    extras: dict = field(default_factory=dict, compare=False)

    def get_base_color_alpha(self, tex_coords: Vec2) -> Vec4:
        """Linear RGBA: factor times the sRGB-decoded texel (alpha not decoded)."""
        factor = self.pbr.base_color_factor
        texture = self.pbr.base_color_texture
        if texture is None:
            return Vec4(*factor)
        px = texture.sample(tex_coords.x, tex_coords.y)
        r, g, b, a = (c / 255.0 for c in px)
        return Vec4(
            factor.x * r ** GAMMA,
            factor.y * g ** GAMMA,
            factor.z * b ** GAMMA,
            factor.w * a,
        )

    def get_base_color(self, tex_coords: Vec2) -> Vec3:
        return self.get_base_color_alpha(tex_coords).xyz()

    def get_metallic(self, tex_coords: Vec2) -> float:
        texture = self.pbr.metallic_texture
        if texture is None:
            return self.pbr.metallic_factor
        return self.pbr.metallic_factor * texture.sample(tex_coords.x, tex_coords.y)[0] / 255.0

    def get_roughness(self, tex_coords: Vec2) -> float:
        texture = self.pbr.roughness_texture
        if texture is None:
            return self.pbr.roughness_factor
        return self.pbr.roughness_factor * texture.sample(tex_coords.x, tex_coords.y)[0] / 255.0

    def get_normal(self, tex_coords: Vec2) -> Optional[Vec3]:
        """Tangent-space normal in [-1, 1] scaled by the normal factor, or None."""
        if self.normal is None:
            return None
        r, g, b = self.normal.texture.sample(tex_coords.x, tex_coords.y)
        return Vec3(r / 127.5 - 1.0, g / 127.5 - 1.0, b / 127.5 - 1.0) * self.normal.factor

    def get_occlusion(self, tex_coords: Vec2) -> Optional[float]:
        if self.occlusion is None:
            return None
        value = self.occlusion.texture.sample(tex_coords.x, tex_coords.y)[0]
        return self.occlusion.factor * value / 255.0

    def get_emissive(self, tex_coords: Vec2) -> Vec3:
        factor = self.emissive.factor
        texture = self.emissive.texture
        if texture is None:
            return Vec3(*factor)
        r, g, b = texture.sample(tex_coords.x, tex_coords.y)
        return Vec3(factor.x * r / 255.0, factor.y * g / 255.0, factor.z * b / 255.0)


# Used by primitives that reference no material.
DEFAULT_MATERIAL = Material()


def load_material(index: Optional[int], cache: ResourceCache,
                  config: Optional[LoadConfig] = None) -> Material:
    """Shared material for a source material index (None = default material)."""
    material = cache.materials.get(index)
    if material is not None:
        logger.debug("material cache hit %r", index)
        return material
    if index is None:
        material = DEFAULT_MATERIAL
    else:
        material = _build_material(index, cache, config or LoadConfig())
    cache.materials[index] = material
    return material


def _build_material(index: int, cache: ResourceCache, config: LoadConfig) -> Material:
    gltf_mat = cache.source.material(index)
    logger.debug("building material %d", index)

    pbr_src = gltf_mat.pbrMetallicRoughness
    if pbr_src is None:
        pbr = PbrMaterial(metallic_factor=1.0, roughness_factor=1.0)
    else:
        base_color_texture = None
        if pbr_src.baseColorTexture is not None:
            base_color_texture = cache.load_base_color_image(pbr_src.baseColorTexture.index)
        metallic_texture = roughness_texture = None
        if pbr_src.metallicRoughnessTexture is not None:
            mr_index = pbr_src.metallicRoughnessTexture.index
            metallic_texture = cache.load_gray_image(mr_index, BLUE)
            roughness_texture = cache.load_gray_image(mr_index, GREEN)
        pbr = PbrMaterial(
            base_color_factor=Vec4(*_or(pbr_src.baseColorFactor, [1.0, 1.0, 1.0, 1.0])),
            base_color_texture=base_color_texture,
            metallic_factor=float(_or(pbr_src.metallicFactor, 1.0)),
            metallic_texture=metallic_texture,
            roughness_factor=float(_or(pbr_src.roughnessFactor, 1.0)),
            roughness_texture=roughness_texture,
        )

    normal = None
    if gltf_mat.normalTexture is not None:
        texture = cache.load_rgb_image(gltf_mat.normalTexture.index)
        if texture is not None:
            normal = NormalMap(texture, float(_or(gltf_mat.normalTexture.scale, 1.0)))

    occlusion = None
    if gltf_mat.occlusionTexture is not None:
        texture = cache.load_gray_image(gltf_mat.occlusionTexture.index, RED)
        if texture is not None:
            occlusion = Occlusion(texture, float(_or(gltf_mat.occlusionTexture.strength, 1.0)))

    emissive_texture = None
    if gltf_mat.emissiveTexture is not None:
        emissive_texture = cache.load_rgb_image(gltf_mat.emissiveTexture.index)
    emissive = Emissive(Vec3(*_or(gltf_mat.emissiveFactor, [0.0, 0.0, 0.0])), emissive_texture)

    return Material(
        pbr=pbr,
        normal=normal,
        occlusion=occlusion,
        emissive=emissive,
        alpha_cutoff=float(_or(gltf_mat.alphaCutoff, 0.5)),
        alpha_mode=_or(gltf_mat.alphaMode, 'OPAQUE'),
        double_sided=bool(gltf_mat.doubleSided),
        name=config.name_of(gltf_mat),
        extras=config.extras_of(gltf_mat),
    )

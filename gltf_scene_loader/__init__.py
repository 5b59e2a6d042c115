#
# PROJECT: gltf-scene-loader
# MODULE: gltf_scene_loader/__init__.py
# STATUS: Level 2 - Implementation
# LOG_REF: 2026-10-19
#

from .math_utils import Vec2, Vec3, Vec4, Mat4
from .config import LoadConfig
from .errors import (LoadError, DocumentParseError, LoadIOError, MissingAttributeError,
                     TextureDecodeError, BadModeError)
from .document import GltfSource
from .texture import Texture
from .cache import ResourceCache
from .material import Material, PbrMaterial, NormalMap, Occlusion, Emissive, DEFAULT_MATERIAL
from .camera import Camera, Perspective, Orthographic
from .light import Light, DirectionalLight, PointLight, SpotLight
from .model import Mode, Vertex, Model
from .scene import Scene
from .loader import load, load_source

__version__ = "0.1.0"

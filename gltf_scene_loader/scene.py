#
# PROJECT: gltf-scene-loader
# MODULE: gltf_scene_loader/scene.py
# STATUS: Level 2 - Implementation
# LOG_REF: 2026-10-19
#

import logging
from typing import Optional

from .cache import ResourceCache
from .camera import Camera, load_camera
from .config import LoadConfig
from .light import load_light
from .math_utils import Mat4, compose
from .model import Model, load_model

logger = logging.getLogger(__name__)


class Scene:
    """
    Flattened content of one glTF scene.

    ``models`` holds one Model per mesh primitive; cameras, lights and
    models are all expressed in world space. Entries appear in depth-first
    traversal order, each node's own entities after those of its children.
    """

    def __init__(self, name: Optional[str] = None):
        self.name = name
        self.models = []    # list of Model
        self.cameras = []   # list of Camera
        self.lights = []    # list of Light

    def __repr__(self):
        return (f"Scene(name={self.name!r}, models={len(self.models)}, "
                f"cameras={len(self.cameras)}, lights={len(self.lights)})")

    def add_camera(self, camera: Camera):
        self.cameras.append(camera)

    def add_light(self, light):
        self.lights.append(light)

    def add_model(self, model: Model):
        self.models.append(model)


def load_scene(gltf_scene, cache: ResourceCache,
               config: Optional[LoadConfig] = None) -> Scene:
    """Walk a glTF scene's node graph and collect its entities.

    Uses an explicit stack so deep hierarchies do not hit the recursion
    limit. A node reachable from several parents is visited once per path.
    The graph must be acyclic.
    """
    config = config or LoadConfig()
    source = cache.source
    scene = Scene(config.name_of(gltf_scene))

    # (node index, parent world matrix or node world matrix, children done)
    stack = [(index, Mat4.identity(), False) for index in reversed(gltf_scene.nodes or [])]
    while stack:
        index, matrix, expanded = stack.pop()
        node = source.node(index)
        if expanded:
            _read_node(scene, node, matrix, cache, config)
            continue
        world = compose(matrix, source.local_transform(node))
        stack.append((index, world, True))
        for child in reversed(node.children or []):
            stack.append((child, world, False))

    logger.debug("loaded %r", scene)
    return scene


def _read_node(scene: Scene, node, world: Mat4, cache: ResourceCache, config: LoadConfig):
    source = cache.source

    if node.camera is not None:
        scene.add_camera(load_camera(source.camera(node.camera), world, config))

    light_index = source.node_light_index(node)
    if light_index is not None:
        light = load_light(source.light(light_index), world, config)
        if light is not None:
            scene.add_light(light)

    if node.mesh is not None:
        mesh = source.mesh(node.mesh)
        mesh_name = config.name_of(mesh)
        for primitive_index, primitive in enumerate(mesh.primitives or []):
            scene.add_model(load_model(primitive, world, cache, config,
                                       mesh_name=mesh_name,
                                       primitive_index=primitive_index))

#
# PROJECT: gltf-scene-loader
# MODULE: gltf_scene_loader/document.py
# STATUS: Level 2 - Implementation
# LOG_REF: 2026-10-19
#
"""Access to a parsed glTF document: buffers, accessors, images, transforms.

Parsing is delegated to pygltflib. This module only resolves the byte
sources a document points at (GLB binary chunk, external files, base64 data
URIs) and views accessor bytes as numpy arrays.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Sequence
from urllib.parse import unquote

import numpy as np
import pygltflib

from .errors import DocumentParseError, LoadIOError
from .math_utils import Mat4

logger = logging.getLogger(__name__)

GLB_MAGIC = b"glTF"
OCTET_STREAM_HEADER = "data:application/octet-stream;base64,"

COMPONENT_DTYPES: dict[int, type] = {
    5120: np.int8,     # BYTE
    5121: np.uint8,    # UNSIGNED_BYTE
    5122: np.int16,    # SHORT
    5123: np.uint16,   # UNSIGNED_SHORT
    5125: np.uint32,   # UNSIGNED_INT
    5126: np.float32,  # FLOAT
}

TYPE_COMPONENT_COUNT: dict[str, int] = {
    "SCALAR": 1,
    "VEC2": 2,
    "VEC3": 3,
    "VEC4": 4,
    "MAT2": 4,
    "MAT3": 9,
    "MAT4": 16,
}


def parse_document(raw: bytes) -> pygltflib.GLTF2:
    """Parse ``.glb`` or ``.gltf`` bytes with pygltflib."""
    try:
        if raw[:4] == GLB_MAGIC:
            gltf = pygltflib.GLTF2.load_from_bytes(raw)
        else:
            gltf = pygltflib.GLTF2.from_json(raw.decode("utf-8"), infer_missing=True)
    except Exception as exc:
        raise DocumentParseError(f"invalid glTF document: {exc}") from exc
    if gltf is None:
        raise DocumentParseError("invalid glTF document")
    return gltf


def data_uri_bytes(gltf: pygltflib.GLTF2, uri: str) -> bytes:
    """Payload of a base64 ``data:`` URI, decoded by pygltflib."""
    header, sep, payload = uri.partition(",")
    if not sep or not header.endswith(";base64"):
        raise DocumentParseError("only base64 data URIs are supported")
    try:
        # pygltflib expects the buffer form of the header
        return gltf.get_data_from_buffer_uri(OCTET_STREAM_HEADER + payload)
    except (ValueError, IndexError) as exc:
        raise DocumentParseError(f"malformed base64 data URI: {exc}") from exc


def normalize_integers(array: np.ndarray) -> np.ndarray:
    """Map normalized integer components to floats in [0, 1] / [-1, 1]."""
    kind = array.dtype
    if kind == np.uint8:
        return array.astype(np.float32) / 255.0
    if kind == np.uint16:
        return array.astype(np.float32) / 65535.0
    if kind == np.int8:
        return np.maximum(array.astype(np.float32) / 127.0, -1.0)
    if kind == np.int16:
        return np.maximum(array.astype(np.float32) / 32767.0, -1.0)
    return array.astype(np.float32)


class GltfSource:
    """A parsed document together with the binary data it references.

    ``buffers`` is indexed like ``gltf.buffers``. ``images``, when given, holds
    already-fetched encoded bytes indexed like ``gltf.images`` and takes
    precedence over the document's own image sources.
    """

    def __init__(self, gltf: pygltflib.GLTF2, buffers: Sequence[bytes],
                 base_dir=".", images: Optional[Sequence[Optional[bytes]]] = None):
        self.gltf = gltf
        self.buffers = list(buffers)
        self.base_dir = Path(base_dir)
        self.images = list(images) if images is not None else None

    @classmethod
    def open(cls, path) -> 'GltfSource':
        """Read and parse a ``.gltf``/``.glb`` file and resolve its buffers."""
        path = Path(path)
        try:
            raw = path.read_bytes()
        except OSError as exc:
            raise LoadIOError(path, exc.strerror or exc) from exc
        gltf = parse_document(raw)
        logger.debug("parsed %s (%d bytes)", path, len(raw))
        return cls.from_gltf(gltf, base_dir=path.parent)

    @classmethod
    def from_gltf(cls, gltf: pygltflib.GLTF2, base_dir=".", buffers=None,
                  images=None) -> 'GltfSource':
        """Wrap an already-parsed document, resolving buffers unless given."""
        base_dir = Path(base_dir)
        if buffers is None:
            buffers = [_resolve_buffer(gltf, i, buf, base_dir)
                       for i, buf in enumerate(gltf.buffers or [])]
        return cls(gltf, buffers, base_dir, images)

    # -- lookups ---------------------------------------------------------

    def _item(self, collection, index: int, kind: str):
        items = collection or []
        if index is None or not 0 <= index < len(items):
            raise DocumentParseError(f"{kind} index {index} out of range")
        return items[index]

    def node(self, index: int):
        return self._item(self.gltf.nodes, index, "node")

    def mesh(self, index: int):
        return self._item(self.gltf.meshes, index, "mesh")

    def camera(self, index: int):
        return self._item(self.gltf.cameras, index, "camera")

    def material(self, index: int):
        return self._item(self.gltf.materials, index, "material")

    def texture(self, index: int):
        return self._item(self.gltf.textures, index, "texture")

    def light(self, index: int) -> dict:
        """KHR_lights_punctual light definition (a plain dict)."""
        extensions = self.gltf.extensions or {}
        lights = (extensions.get("KHR_lights_punctual") or {}).get("lights") or []
        return self._item(lights, index, "light")

    @staticmethod
    def node_light_index(node) -> Optional[int]:
        extensions = getattr(node, "extensions", None) or {}
        ext = extensions.get("KHR_lights_punctual")
        if not ext:
            return None
        return ext.get("light")

    @staticmethod
    def local_transform(node) -> Mat4:
        """Node matrix if present, otherwise T * R * S."""
        if node.matrix is not None and len(node.matrix) == 16:
            return Mat4.from_column_major(node.matrix)
        return Mat4.from_trs(node.translation, node.rotation, node.scale)

    # -- binary data -----------------------------------------------------

    def view_bytes(self, view_index: int) -> memoryview:
        view = self._item(self.gltf.bufferViews, view_index, "bufferView")
        data = self._item(self.buffers, view.buffer, "buffer")
        start = view.byteOffset or 0
        end = start + view.byteLength
        if end > len(data):
            raise DocumentParseError(
                f"bufferView {view_index} overruns buffer {view.buffer}")
        return memoryview(data)[start:end]

    def _read_view(self, view_index: int, byte_offset: int, dtype: np.dtype,
                   count: int, components: int, stride: Optional[int] = None) -> np.ndarray:
        data = self.view_bytes(view_index)
        element_size = dtype.itemsize * components
        stride = stride or element_size
        if count == 0:
            return np.zeros((0, components), dtype=dtype)
        needed = byte_offset + stride * (count - 1) + element_size
        if needed > len(data):
            raise DocumentParseError(f"accessor data overruns bufferView {view_index}")
        array = np.ndarray(shape=(count, components), dtype=dtype, buffer=data,
                           offset=byte_offset, strides=(stride, dtype.itemsize))
        return array.copy()

    def read_accessor(self, index: int) -> np.ndarray:
        """Raw accessor contents as a ``(count, components)`` array."""
        accessor = self._item(self.gltf.accessors, index, "accessor")
        try:
            dtype = np.dtype(COMPONENT_DTYPES[accessor.componentType]).newbyteorder("<")
            components = TYPE_COMPONENT_COUNT[accessor.type]
        except KeyError as exc:
            raise DocumentParseError(f"accessor {index} has unsupported layout {exc}") from exc

        if accessor.bufferView is None:
            array = np.zeros((accessor.count, components), dtype=dtype)
        else:
            view = self._item(self.gltf.bufferViews, accessor.bufferView, "bufferView")
            array = self._read_view(accessor.bufferView, accessor.byteOffset or 0,
                                    dtype, accessor.count, components, view.byteStride)

        sparse = getattr(accessor, "sparse", None)
        if sparse is not None and sparse.count:
            self._apply_sparse(array, sparse, dtype, components)
        return array

    def _apply_sparse(self, array, sparse, dtype, components):
        idx_dtype = np.dtype(COMPONENT_DTYPES[sparse.indices.componentType]).newbyteorder("<")
        positions = self._read_view(sparse.indices.bufferView,
                                    sparse.indices.byteOffset or 0,
                                    idx_dtype, sparse.count, 1)[:, 0]
        values = self._read_view(sparse.values.bufferView,
                                 sparse.values.byteOffset or 0,
                                 dtype, sparse.count, components)
        if positions.size and int(positions.max()) >= len(array):
            raise DocumentParseError("sparse accessor index out of range")
        array[positions.astype(np.int64)] = values

    def read_floats(self, index: int) -> np.ndarray:
        """Accessor contents as float32, normalized integers mapped to floats."""
        accessor = self._item(self.gltf.accessors, index, "accessor")
        array = self.read_accessor(index)
        if array.dtype.kind == "f":
            return array.astype(np.float32)
        if accessor.normalized:
            return normalize_integers(array)
        return array.astype(np.float32)

    def read_indices(self, index: int) -> list[int]:
        return [int(i) for i in self.read_accessor(index)[:, 0]]

    def image_bytes(self, image_index: int) -> bytes:
        """Encoded bytes of an image: pre-fetched, buffer view, data URI or file."""
        if self.images is not None and image_index < len(self.images) \
                and self.images[image_index] is not None:
            return self.images[image_index]
        image = self._item(self.gltf.images, image_index, "image")
        if image.bufferView is not None:
            return bytes(self.view_bytes(image.bufferView))
        if not image.uri:
            raise DocumentParseError(f"image {image_index} has no data")
        if image.uri.startswith("data:"):
            return data_uri_bytes(self.gltf, image.uri)
        path = self.base_dir / unquote(image.uri)
        try:
            return path.read_bytes()
        except OSError as exc:
            raise LoadIOError(path, exc.strerror or exc) from exc


def _resolve_buffer(gltf, index, buffer, base_dir: Path) -> bytes:
    if buffer.uri is None:
        blob = gltf.binary_blob()
        if blob is None:
            raise DocumentParseError(f"buffer {index} has no data")
        return bytes(blob)
    if buffer.uri.startswith("data:"):
        return data_uri_bytes(gltf, buffer.uri)
    path = base_dir / unquote(buffer.uri)
    try:
        return path.read_bytes()
    except OSError as exc:
        raise LoadIOError(path, exc.strerror or exc) from exc

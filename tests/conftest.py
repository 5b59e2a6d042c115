"""Pytest configuration and shared fixtures."""

import base64
import io
import json
import struct

import numpy as np
import pytest
from PIL import Image

FLOAT = 5126
UNSIGNED_BYTE = 5121
UNSIGNED_SHORT = 5123
UNSIGNED_INT = 5125

_DTYPES = {
    5120: np.int8,
    UNSIGNED_BYTE: np.uint8,
    5122: np.int16,
    UNSIGNED_SHORT: np.uint16,
    UNSIGNED_INT: np.uint32,
    FLOAT: np.float32,
}

_TYPES = {1: "SCALAR", 2: "VEC2", 3: "VEC3", 4: "VEC4"}


class GltfBuilder:
    """Builds small glTF documents with all binary data in one buffer."""

    def __init__(self):
        self.doc = {
            "asset": {"version": "2.0"},
            "scenes": [],
            "nodes": [],
            "meshes": [],
            "accessors": [],
            "bufferViews": [],
        }
        self.blob = bytearray()

    def _view(self, data: bytes, **extra) -> int:
        while len(self.blob) % 4:
            self.blob.append(0)
        view = {"buffer": 0, "byteOffset": len(self.blob), "byteLength": len(data)}
        view.update(extra)
        self.blob.extend(data)
        self.doc["bufferViews"].append(view)
        return len(self.doc["bufferViews"]) - 1

    def accessor(self, values, component_type=FLOAT, normalized=False) -> int:
        array = np.asarray(values, dtype=_DTYPES[component_type])
        if array.ndim == 1:
            array = array.reshape(-1, 1)
        view = self._view(array.astype(array.dtype.newbyteorder("<")).tobytes())
        accessor = {
            "bufferView": view,
            "componentType": component_type,
            "count": int(array.shape[0]),
            "type": _TYPES[array.shape[1]],
        }
        if normalized:
            accessor["normalized"] = True
        self.doc["accessors"].append(accessor)
        return len(self.doc["accessors"]) - 1

    def raw_accessor(self, accessor: dict) -> int:
        self.doc["accessors"].append(accessor)
        return len(self.doc["accessors"]) - 1

    def raw_view(self, data: bytes, **extra) -> int:
        return self._view(data, **extra)

    def texture(self, image: Image.Image) -> int:
        out = io.BytesIO()
        image.save(out, format="PNG")
        view = self._view(out.getvalue())
        self.doc.setdefault("images", []).append({"bufferView": view, "mimeType": "image/png"})
        self.doc.setdefault("textures", []).append(
            {"source": len(self.doc["images"]) - 1})
        return len(self.doc["textures"]) - 1

    def material(self, **fields) -> int:
        self.doc.setdefault("materials", []).append(fields)
        return len(self.doc["materials"]) - 1

    def primitive(self, positions, indices=None, mode=None, material=None,
                  index_type=UNSIGNED_SHORT, **attributes) -> dict:
        prim = {"attributes": {"POSITION": self.accessor(positions)}}
        for name, accessor in attributes.items():
            prim["attributes"][name] = accessor
        if indices is not None:
            prim["indices"] = self.accessor(indices, index_type)
        if mode is not None:
            prim["mode"] = mode
        if material is not None:
            prim["material"] = material
        return prim

    def mesh(self, *primitives, name=None) -> int:
        mesh = {"primitives": list(primitives)}
        if name:
            mesh["name"] = name
        self.doc["meshes"].append(mesh)
        return len(self.doc["meshes"]) - 1

    def camera(self, **fields) -> int:
        self.doc.setdefault("cameras", []).append(fields)
        return len(self.doc["cameras"]) - 1

    def light(self, **fields) -> int:
        ext = self.doc.setdefault("extensions", {}).setdefault(
            "KHR_lights_punctual", {"lights": []})
        ext["lights"].append(fields)
        self.doc.setdefault("extensionsUsed", [])
        if "KHR_lights_punctual" not in self.doc["extensionsUsed"]:
            self.doc["extensionsUsed"].append("KHR_lights_punctual")
        return len(ext["lights"]) - 1

    def node(self, light=None, **fields) -> int:
        node = dict(fields)
        if light is not None:
            node["extensions"] = {"KHR_lights_punctual": {"light": light}}
        self.doc["nodes"].append(node)
        return len(self.doc["nodes"]) - 1

    def scene(self, *nodes, name=None) -> int:
        scene = {"nodes": list(nodes)}
        if name:
            scene["name"] = name
        self.doc["scenes"].append(scene)
        return len(self.doc["scenes"]) - 1

    def to_json(self) -> str:
        doc = dict(self.doc)
        if self.blob:
            payload = base64.b64encode(bytes(self.blob)).decode("ascii")
            doc["buffers"] = [{
                "byteLength": len(self.blob),
                "uri": "data:application/octet-stream;base64," + payload,
            }]
        return json.dumps(doc)

    def to_glb(self) -> bytes:
        doc = dict(self.doc)
        blob = bytes(self.blob)
        blob += b"\0" * (-len(blob) % 4)
        if blob:
            doc["buffers"] = [{"byteLength": len(blob)}]
        text = json.dumps(doc).encode("utf-8")
        text += b" " * (-len(text) % 4)
        chunks = struct.pack("<II", len(text), 0x4E4F534A) + text
        if blob:
            chunks += struct.pack("<II", len(blob), 0x004E4942) + blob
        return struct.pack("<4sII", b"glTF", 2, 12 + len(chunks)) + chunks

    def write(self, path):
        if str(path).endswith(".glb"):
            path.write_bytes(self.to_glb())
        else:
            path.write_text(self.to_json(), encoding="utf-8")
        return path


def checker_image(size=4):
    """RGBA image whose every channel varies with the pixel position."""
    image = Image.new("RGBA", (size, size))
    for y in range(size):
        for x in range(size):
            image.putpixel((x, y), (x * 10, y * 20 + 1, (x + y) * 5 + 2, 255 - x))
    return image


@pytest.fixture
def builder():
    return GltfBuilder()


@pytest.fixture
def write_gltf(tmp_path):
    """Write a builder to a file in tmp_path and return its path."""
    def _write(gltf_builder, name="scene.gltf"):
        return gltf_builder.write(tmp_path / name)
    return _write


@pytest.fixture
def checker():
    return checker_image

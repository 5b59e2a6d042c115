"""Tests for document parsing, buffer resolution and accessor decoding."""

import base64
import json
import struct

import numpy as np
import pygltflib
import pytest

from gltf_scene_loader.document import GltfSource, data_uri_bytes, parse_document
from gltf_scene_loader.errors import DocumentParseError, LoadIOError


def open_source(builder, write_gltf, name="doc.gltf"):
    return GltfSource.open(write_gltf(builder, name))


class TestParsing:

    def test_missing_file_is_io_error(self, tmp_path):
        with pytest.raises(LoadIOError):
            GltfSource.open(tmp_path / "missing.glb")

    def test_garbage_is_parse_error(self):
        with pytest.raises(DocumentParseError):
            parse_document(b"\x00\x01 definitely not gltf")

    def test_truncated_glb_is_parse_error(self):
        with pytest.raises(DocumentParseError):
            parse_document(b"glTF\x02\x00\x00\x00")

    def test_glb_binary_chunk_is_used_as_buffer(self, builder, write_gltf):
        accessor = builder.accessor([[1, 2, 3], [4, 5, 6]])
        source = open_source(builder, write_gltf, "doc.glb")
        np.testing.assert_array_equal(source.read_floats(accessor), [[1, 2, 3], [4, 5, 6]])

    def test_external_buffer_file(self, builder, tmp_path):
        builder.accessor([[1, 0, 0]])
        doc = json.loads(builder.to_json())
        doc["buffers"][0]["uri"] = "data.bin"
        blob = bytes(builder.blob)
        (tmp_path / "data.bin").write_bytes(blob)
        (tmp_path / "ext.gltf").write_text(json.dumps(doc))
        source = GltfSource.open(tmp_path / "ext.gltf")
        assert source.buffers[0] == blob

    def test_missing_external_buffer_is_io_error(self, builder, tmp_path):
        builder.accessor([[1, 0, 0]])
        doc = json.loads(builder.to_json())
        doc["buffers"][0]["uri"] = "nowhere.bin"
        (tmp_path / "ext.gltf").write_text(json.dumps(doc))
        with pytest.raises(LoadIOError):
            GltfSource.open(tmp_path / "ext.gltf")


class TestDataUri:

    def test_base64_payload(self):
        payload = base64.b64encode(b"\x01\x02\x03").decode()
        uri = "data:application/octet-stream;base64," + payload
        assert data_uri_bytes(pygltflib.GLTF2(), uri) == b"\x01\x02\x03"

    def test_image_mime_type(self, builder, write_gltf):
        builder.accessor([[0, 0, 0]])
        builder.doc["images"] = [{"uri": "data:image/png;base64,"
                                         + base64.b64encode(b"png!").decode()}]
        assert open_source(builder, write_gltf).image_bytes(0) == b"png!"

    @pytest.mark.parametrize("uri", [
        "data:application/octet-stream;base64",
        "data:text/plain,hi%20there",
    ])
    def test_unsupported(self, uri):
        with pytest.raises(DocumentParseError):
            data_uri_bytes(pygltflib.GLTF2(), uri)


class TestAccessors:

    def test_indices_upcast_to_int(self, builder, write_gltf):
        accessor = builder.accessor([0, 1, 2, 65535], 5123)
        source = open_source(builder, write_gltf)
        assert source.read_indices(accessor) == [0, 1, 2, 65535]

    def test_normalized_bytes_become_unit_floats(self, builder, write_gltf):
        accessor = builder.accessor([[0, 255], [51, 102]], 5121, normalized=True)
        source = open_source(builder, write_gltf)
        np.testing.assert_allclose(source.read_floats(accessor), [[0, 1], [0.2, 0.4]])

    def test_normalized_signed_shorts_clamp_at_minus_one(self, builder, write_gltf):
        accessor = builder.accessor([[-32768, 32767]], 5122, normalized=True)
        source = open_source(builder, write_gltf)
        np.testing.assert_allclose(source.read_floats(accessor), [[-1, 1]])

    def test_interleaved_view_with_stride(self, builder, write_gltf):
        # two VEC2 floats per 16-byte element, the second half is padding
        data = b"".join(struct.pack("<4f", x, x + 0.5, -1, -1) for x in (1.0, 2.0, 3.0))
        view = builder.raw_view(data, byteStride=16)
        accessor = builder.raw_accessor(
            {"bufferView": view, "componentType": 5126, "count": 3, "type": "VEC2"})
        source = open_source(builder, write_gltf)
        np.testing.assert_array_equal(source.read_floats(accessor),
                                      [[1, 1.5], [2, 2.5], [3, 3.5]])

    def test_accessor_byte_offset(self, builder, write_gltf):
        view = builder.raw_view(struct.pack("<4f", 9, 1, 2, 3))
        accessor = builder.raw_accessor(
            {"bufferView": view, "byteOffset": 4, "componentType": 5126,
             "count": 1, "type": "VEC3"})
        source = open_source(builder, write_gltf)
        np.testing.assert_array_equal(source.read_floats(accessor), [[1, 2, 3]])

    def test_overrunning_accessor_is_parse_error(self, builder, write_gltf):
        view = builder.raw_view(struct.pack("<3f", 1, 2, 3))
        accessor = builder.raw_accessor(
            {"bufferView": view, "componentType": 5126, "count": 2, "type": "VEC3"})
        source = open_source(builder, write_gltf)
        with pytest.raises(DocumentParseError):
            source.read_floats(accessor)

    def test_sparse_accessor_without_view(self, builder, write_gltf):
        indices = builder.raw_view(struct.pack("<2H", 1, 3))
        values = builder.raw_view(struct.pack("<6f", 1, 1, 1, 2, 2, 2))
        accessor = builder.raw_accessor({
            "componentType": 5126, "count": 4, "type": "VEC3",
            "sparse": {
                "count": 2,
                "indices": {"bufferView": indices, "componentType": 5123},
                "values": {"bufferView": values},
            },
        })
        source = open_source(builder, write_gltf)
        np.testing.assert_array_equal(source.read_floats(accessor),
                                      [[0, 0, 0], [1, 1, 1], [0, 0, 0], [2, 2, 2]])

    def test_unknown_accessor_index(self, builder, write_gltf):
        builder.accessor([[0, 0, 0]])
        source = open_source(builder, write_gltf)
        with pytest.raises(DocumentParseError):
            source.read_floats(7)


class TestImages:

    def test_prefetched_images_take_precedence(self, builder, write_gltf, checker):
        builder.texture(checker())
        source = open_source(builder, write_gltf)
        override = GltfSource(source.gltf, source.buffers, source.base_dir, images=[b"png!"])
        assert override.image_bytes(0) == b"png!"

    def test_external_image_file(self, builder, tmp_path):
        builder.accessor([[0, 0, 0]])
        builder.doc["images"] = [{"uri": "tex%20a.png"}]
        (tmp_path / "tex a.png").write_bytes(b"bytes")
        path = builder.write(tmp_path / "doc.gltf")
        assert GltfSource.open(path).image_bytes(0) == b"bytes"

    def test_missing_external_image_is_io_error(self, builder, tmp_path):
        builder.accessor([[0, 0, 0]])
        builder.doc["images"] = [{"uri": "gone.png"}]
        path = builder.write(tmp_path / "doc.gltf")
        with pytest.raises(LoadIOError):
            GltfSource.open(path).image_bytes(0)

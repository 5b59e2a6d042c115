"""Tests for vector and matrix helpers."""

import math

import pytest

from gltf_scene_loader.math_utils import Mat4, Vec3, Vec4, compose


def assert_vec_close(actual, expected, tol=1e-5):
    assert len(list(actual)) == len(list(expected))
    for a, e in zip(actual, expected):
        assert a == pytest.approx(e, abs=tol)


class TestVec3:

    def test_normalize(self):
        assert_vec_close(Vec3(3, 0, 4).normalize(), (0.6, 0, 0.8))

    def test_normalize_zero_stays_zero(self):
        assert Vec3(0, 0, 0).normalize() == Vec3(0, 0, 0)

    def test_negation(self):
        assert -Vec3(1, -2, 3) == Vec3(-1, 2, -3)


class TestMat4:

    def test_compose_with_identity_parent(self):
        local = Mat4.translation(1, 2, 3)
        assert compose(Mat4.identity(), local) == local

    def test_compose_is_parent_times_local(self):
        parent = Mat4.translation(10, 0, 0)
        local = Mat4.scale(2, 2, 2)
        world = compose(parent, local)
        # scale first, then move
        assert_vec_close(world.transform_point((1, 1, 1)), (12, 2, 2))
        assert world == parent @ local
        assert world != local @ parent

    def test_from_column_major(self):
        values = [1, 0, 0, 0,
                  0, 1, 0, 0,
                  0, 0, 1, 0,
                  5, 6, 7, 1]
        mat = Mat4.from_column_major(values)
        assert mat.translation_part() == Vec3(5, 6, 7)
        assert mat.column(3) == Vec4(5, 6, 7, 1)

    def test_from_column_major_rejects_short_input(self):
        with pytest.raises(ValueError):
            Mat4.from_column_major([1, 2, 3])

    def test_quaternion_quarter_turn_about_y(self):
        half = math.pi / 4
        quat = Mat4.rotation_quaternion(0, math.sin(half), 0, math.cos(half))
        expected = [[0, 0, 1, 0], [0, 1, 0, 0], [-1, 0, 0, 0], [0, 0, 0, 1]]
        for r in range(4):
            for c in range(4):
                assert quat.m[r][c] == pytest.approx(expected[r][c], abs=1e-9)

    def test_point_with_zero_w_is_rejected(self):
        mat = Mat4.from_column_major([1, 0, 0, 0, 0, 1, 0, 0, 0, 0, 1, 0, 0, 0, 0, 0])
        with pytest.raises(ValueError):
            mat.transform_point((1, 2, 3))

    def test_from_trs_order(self):
        half = math.pi / 4
        mat = Mat4.from_trs(translation=(1, 0, 0),
                            rotation=(0, 0, math.sin(half), math.cos(half)),
                            scale=(2, 2, 2))
        # (1,0,0) scaled to (2,0,0), rotated 90deg about Z to (0,2,0), moved by +x
        assert_vec_close(mat.transform_point((1, 0, 0)), (1, 2, 0))

    def test_from_trs_defaults_to_identity(self):
        assert Mat4.from_trs() == Mat4.identity()

    def test_transform_point_divides_by_w(self):
        mat = Mat4.identity()
        mat.m[3][3] = 2.0
        assert_vec_close(mat.transform_point((2, 4, 6)), (1, 2, 3))

    def test_transform_vector_ignores_translation(self):
        mat = Mat4.translation(5, 5, 5) @ Mat4.scale(2, 1, 1)
        assert_vec_close(mat.transform_vector((1, 1, 0)), (2, 1, 0))

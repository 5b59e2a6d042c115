#
# PROJECT: gltf-scene-loader
# MODULE: gltf_scene_loader/math_utils.py
# STATUS: Level 2 - Implementation
# LOG_REF: 2026-10-19
#

import math


class Vec2:
    """2-component vector, used for texture coordinates."""
    __slots__ = ('x', 'y')

    def __init__(self, x: float = 0.0, y: float = 0.0):
        self.x = float(x)
        self.y = float(y)

    def __repr__(self):
        return f"Vec2({self.x:.4f}, {self.y:.4f})"

    def __iter__(self):
        yield self.x
        yield self.y

    def __getitem__(self, index):
        if index == 0: return self.x
        if index == 1: return self.y
        raise IndexError("Vec2 index out of range")

    def __eq__(self, other):
        if isinstance(other, Vec2):
            return self.x == other.x and self.y == other.y
        return NotImplemented

    def __hash__(self):
        return hash((self.x, self.y))


class Vec3:
    """Immutable 3-component vector."""
    __slots__ = ('x', 'y', 'z')

    def __init__(self, x: float = 0.0, y: float = 0.0, z: float = 0.0):
        self.x = float(x)
        self.y = float(y)
        self.z = float(z)

    def __repr__(self):
        return f"Vec3({self.x:.4f}, {self.y:.4f}, {self.z:.4f})"

    def __iter__(self):
        yield self.x
        yield self.y
        yield self.z

    def __getitem__(self, index):
        if index == 0: return self.x
        if index == 1: return self.y
        if index == 2: return self.z
        raise IndexError("Vec3 index out of range")

    def __eq__(self, other):
        if isinstance(other, Vec3):
            return self.x == other.x and self.y == other.y and self.z == other.z
        return NotImplemented

    def __hash__(self):
        return hash((self.x, self.y, self.z))

    def __add__(self, other):
        if isinstance(other, Vec3):
            return Vec3(self.x + other.x, self.y + other.y, self.z + other.z)
        return NotImplemented

    def __sub__(self, other):
        if isinstance(other, Vec3):
            return Vec3(self.x - other.x, self.y - other.y, self.z - other.z)
        return NotImplemented

    def __neg__(self):
        return Vec3(-self.x, -self.y, -self.z)

    def __mul__(self, scalar):
        return Vec3(self.x * scalar, self.y * scalar, self.z * scalar)

    __rmul__ = __mul__

    def __truediv__(self, scalar):
        return Vec3(self.x / scalar, self.y / scalar, self.z / scalar)

    def magnitude(self) -> float:
        return math.sqrt(self.x * self.x + self.y * self.y + self.z * self.z)

    def normalize(self) -> 'Vec3':
        m = self.magnitude()
        if m == 0:
            return Vec3(0, 0, 0)
        return self / m

    def is_close(self, other, tol: float = 1e-5) -> bool:
        return (self - other).magnitude() <= tol


class Vec4:
    """4-component vector: tangents (xyz + handedness), RGBA colors."""
    __slots__ = ('x', 'y', 'z', 'w')

    def __init__(self, x: float = 0.0, y: float = 0.0, z: float = 0.0, w: float = 0.0):
        self.x = float(x)
        self.y = float(y)
        self.z = float(z)
        self.w = float(w)

    def __repr__(self):
        return f"Vec4({self.x:.4f}, {self.y:.4f}, {self.z:.4f}, {self.w:.4f})"

    def __iter__(self):
        yield self.x
        yield self.y
        yield self.z
        yield self.w

    def __getitem__(self, index):
        if index == 0: return self.x
        if index == 1: return self.y
        if index == 2: return self.z
        if index == 3: return self.w
        raise IndexError("Vec4 index out of range")

    def __eq__(self, other):
        if isinstance(other, Vec4):
            return tuple(self) == tuple(other)
        return NotImplemented

    def __hash__(self):
        return hash(tuple(self))

    def xyz(self) -> Vec3:
        return Vec3(self.x, self.y, self.z)


class Mat4:
    """4x4 matrix stored as [row][col], used with column vectors.

    Column 0/1/2 hold the right/up/backward axes of a transform and column 3
    its translation, so ``parent @ local`` composes a child's world matrix.
    """
    __slots__ = ('m',)

    def __init__(self, data=None):
        if data:
            self.m = [[float(v) for v in row] for row in data]
        else:
            self.m = [[0.0]*4 for _ in range(4)]

    def __repr__(self):
        rows = ", ".join("[" + ", ".join(f"{v:.4f}" for v in row) + "]" for row in self.m)
        return f"Mat4({rows})"

    def __eq__(self, other):
        if isinstance(other, Mat4):
            return self.m == other.m
        return NotImplemented

    __hash__ = None

    @classmethod
    def identity(cls) -> 'Mat4':
        res = cls()
        for i in range(4):
            res.m[i][i] = 1.0
        return res

    @classmethod
    def translation(cls, x, y, z) -> 'Mat4':
        mat = cls.identity()
        mat.m[0][3] = x
        mat.m[1][3] = y
        mat.m[2][3] = z
        return mat

    @classmethod
    def scale(cls, sx, sy, sz) -> 'Mat4':
        mat = cls.identity()
        mat.m[0][0] = sx
        mat.m[1][1] = sy
        mat.m[2][2] = sz
        return mat

    @classmethod
    def rotation_quaternion(cls, x, y, z, w) -> 'Mat4':
        """Rotation from a unit quaternion given in glTF (x, y, z, w) order."""
        mat = cls.identity()
        mat.m[0][0] = 1 - 2 * (y * y + z * z)
        mat.m[0][1] = 2 * (x * y - z * w)
        mat.m[0][2] = 2 * (x * z + y * w)
        mat.m[1][0] = 2 * (x * y + z * w)
        mat.m[1][1] = 1 - 2 * (x * x + z * z)
        mat.m[1][2] = 2 * (y * z - x * w)
        mat.m[2][0] = 2 * (x * z - y * w)
        mat.m[2][1] = 2 * (y * z + x * w)
        mat.m[2][2] = 1 - 2 * (x * x + y * y)
        return mat

    @classmethod
    def from_column_major(cls, values) -> 'Mat4':
        """Build from 16 floats in column-major order (glTF ``node.matrix``)."""
        values = list(values)
        if len(values) != 16:
            raise ValueError(f"expected 16 matrix values, got {len(values)}")
        mat = cls()
        for col in range(4):
            for row in range(4):
                mat.m[row][col] = float(values[col * 4 + row])
        return mat

    @classmethod
    def from_trs(cls, translation=None, rotation=None, scale=None) -> 'Mat4':
        """Compose T * R * S; missing parts default to identity."""
        mat = cls.identity()
        if translation is not None:
            mat = mat @ cls.translation(*translation)
        if rotation is not None:
            mat = mat @ cls.rotation_quaternion(*rotation)
        if scale is not None:
            mat = mat @ cls.scale(*scale)
        return mat

    def __matmul__(self, other):
        # Matrix multiplication
        if isinstance(other, Mat4):
            res = Mat4()
            for r in range(4):
                for c in range(4):
                    val = 0.0
                    for k in range(4):
                        val += self.m[r][k] * other.m[k][c]
                    res.m[r][c] = val
            return res
        return NotImplemented

    def column(self, index: int) -> Vec4:
        return Vec4(self.m[0][index], self.m[1][index], self.m[2][index], self.m[3][index])

    def translation_part(self) -> Vec3:
        return Vec3(self.m[0][3], self.m[1][3], self.m[2][3])

    def axis(self, index: int) -> Vec3:
        """Column ``index`` as a direction (w dropped)."""
        return Vec3(self.m[0][index], self.m[1][index], self.m[2][index])

    def transform_point(self, v) -> Vec3:
        """Transform (x, y, z, 1) and divide by the resulting w."""
        x, y, z = v[0], v[1], v[2]
        m = self.m
        rx = m[0][0]*x + m[0][1]*y + m[0][2]*z + m[0][3]
        ry = m[1][0]*x + m[1][1]*y + m[1][2]*z + m[1][3]
        rz = m[2][0]*x + m[2][1]*y + m[2][2]*z + m[2][3]
        rw = m[3][0]*x + m[3][1]*y + m[3][2]*z + m[3][3]
        if rw == 0.0:
            raise ValueError("point maps to w == 0")
        return Vec3(rx / rw, ry / rw, rz / rw)

    def transform_vector(self, v) -> Vec3:
        """Transform (x, y, z, 0): no translation, no divide."""
        x, y, z = v[0], v[1], v[2]
        m = self.m
        return Vec3(
            m[0][0]*x + m[0][1]*y + m[0][2]*z,
            m[1][0]*x + m[1][1]*y + m[1][2]*z,
            m[2][0]*x + m[2][1]*y + m[2][2]*z,
        )


def compose(parent_world: Mat4, local: Mat4) -> Mat4:
    """World transform of a node: ``parent_world * local``."""
    return parent_world @ local

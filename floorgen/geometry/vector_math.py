"""
Minimal vector and quaternion math for room placement.

Conventions:
- World is Y-up; room footprints lie on the XZ plane
- Local forward is +Z, right is +X
- Vectors are numpy float64 arrays of shape (3,)
- Quaternions are stored (w, x, y, z) and compose with the Hamilton product,
  so (a * b).rotate(v) == a.rotate(b.rotate(v))
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Sequence, Tuple, Union

import numpy as np

VectorLike = Union[np.ndarray, Sequence[float]]

# Threshold for treating two unit vectors as parallel / anti-parallel
PARALLEL_EPSILON = 1e-9


def vec3(x: float = 0.0, y: float = 0.0, z: float = 0.0) -> np.ndarray:
    """Create a float64 3-vector."""
    return np.array([x, y, z], dtype=np.float64)


def as_vec3(value: VectorLike) -> np.ndarray:
    """Coerce a sequence or array into a fresh float64 3-vector."""
    arr = np.array(value, dtype=np.float64)
    if arr.shape != (3,):
        raise ValueError(f"Expected a 3-vector, got shape {arr.shape}")
    return arr


UP = vec3(0.0, 1.0, 0.0)
RIGHT = vec3(1.0, 0.0, 0.0)
FORWARD = vec3(0.0, 0.0, 1.0)
ZERO = vec3()


def normalize(v: VectorLike) -> np.ndarray:
    """Return v scaled to unit length.

    Raises:
        ValueError: If v has (near) zero length
    """
    arr = as_vec3(v)
    length = float(np.linalg.norm(arr))
    if length < 1e-12:
        raise ValueError("Cannot normalize a zero-length vector")
    return arr / length


def distance(a: VectorLike, b: VectorLike) -> float:
    return float(np.linalg.norm(as_vec3(a) - as_vec3(b)))


def vector_tuple(v: VectorLike) -> Tuple[float, float, float]:
    """Convert a vector to a plain tuple of Python floats (JSON friendly)."""
    arr = as_vec3(v)
    return (float(arr[0]), float(arr[1]), float(arr[2]))


@dataclass(frozen=True)
class Quaternion:
    """Rotation quaternion (w, x, y, z)."""
    w: float = 1.0
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def identity(cls) -> 'Quaternion':
        return cls(1.0, 0.0, 0.0, 0.0)

    @classmethod
    def from_tuple(cls, values: Iterable[float]) -> 'Quaternion':
        w, x, y, z = (float(v) for v in values)
        return cls(w, x, y, z)

    @classmethod
    def from_axis_angle(cls, axis: VectorLike, degrees: float) -> 'Quaternion':
        """Rotation of `degrees` about `axis` (right-hand rule)."""
        unit = normalize(axis)
        half = math.radians(degrees) / 2.0
        s = math.sin(half)
        return cls(math.cos(half), unit[0] * s, unit[1] * s, unit[2] * s)

    @classmethod
    def from_euler(cls, x: float = 0.0, y: float = 0.0, z: float = 0.0) -> 'Quaternion':
        """Rotation from Euler angles in degrees.

        Applied about Z first, then X, then Y (yaw last), which keeps a
        pure yaw value equal to the heading on the XZ plane.
        """
        qx = cls.from_axis_angle(RIGHT, x)
        qy = cls.from_axis_angle(UP, y)
        qz = cls.from_axis_angle(FORWARD, z)
        return qy * qx * qz

    @classmethod
    def from_to_rotation(cls, from_dir: VectorLike, to_dir: VectorLike) -> 'Quaternion':
        """Shortest rotation that turns `from_dir` onto `to_dir`.

        Opposite vectors have no unique shortest arc; the half turn is taken
        about the world up axis whenever `from_dir` is not vertical, so two
        horizontal doorways are always flipped around Y.
        """
        a = normalize(from_dir)
        b = normalize(to_dir)
        d = float(np.dot(a, b))

        if d >= 1.0 - PARALLEL_EPSILON:
            return cls.identity()

        if d <= -1.0 + PARALLEL_EPSILON:
            axis = UP - a * float(np.dot(a, UP))
            if np.linalg.norm(axis) < 1e-6:
                axis = RIGHT - a * float(np.dot(a, RIGHT))
            return cls.from_axis_angle(axis, 180.0)

        c = np.cross(a, b)
        return cls(1.0 + d, float(c[0]), float(c[1]), float(c[2])).normalized()

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def __mul__(self, other: 'Quaternion') -> 'Quaternion':
        if not isinstance(other, Quaternion):
            return NotImplemented
        w1, x1, y1, z1 = self.w, self.x, self.y, self.z
        w2, x2, y2, z2 = other.w, other.x, other.y, other.z
        return Quaternion(
            w1 * w2 - x1 * x2 - y1 * y2 - z1 * z2,
            w1 * x2 + x1 * w2 + y1 * z2 - z1 * y2,
            w1 * y2 - x1 * z2 + y1 * w2 + z1 * x2,
            w1 * z2 + x1 * y2 - y1 * x2 + z1 * w2,
        )

    def normalized(self) -> 'Quaternion':
        n = math.sqrt(self.w ** 2 + self.x ** 2 + self.y ** 2 + self.z ** 2)
        if n < 1e-12:
            return Quaternion.identity()
        return Quaternion(self.w / n, self.x / n, self.y / n, self.z / n)

    def inverse(self) -> 'Quaternion':
        """Inverse of a unit quaternion (its conjugate)."""
        return Quaternion(self.w, -self.x, -self.y, -self.z)

    def to_matrix(self) -> np.ndarray:
        """3x3 rotation matrix."""
        w, x, y, z = self.w, self.x, self.y, self.z
        return np.array([
            [1.0 - 2.0 * (y * y + z * z), 2.0 * (x * y - z * w), 2.0 * (x * z + y * w)],
            [2.0 * (x * y + z * w), 1.0 - 2.0 * (x * x + z * z), 2.0 * (y * z - x * w)],
            [2.0 * (x * z - y * w), 2.0 * (y * z + x * w), 1.0 - 2.0 * (x * x + y * y)],
        ], dtype=np.float64)

    def rotate(self, v: VectorLike) -> np.ndarray:
        """Rotate a vector by this quaternion."""
        return self.to_matrix() @ as_vec3(v)

    def is_close(self, other: 'Quaternion', tolerance: float = 1e-6) -> bool:
        """True if both quaternions describe the same rotation (q and -q agree)."""
        dot = self.w * other.w + self.x * other.x + self.y * other.y + self.z * other.z
        return abs(dot) >= 1.0 - tolerance

    def yaw_degrees(self) -> float:
        """Heading of the rotated forward axis on the XZ plane, in [0, 360)."""
        f = self.rotate(FORWARD)
        return math.degrees(math.atan2(f[0], f[2])) % 360.0

    def as_tuple(self) -> Tuple[float, float, float, float]:
        return (float(self.w), float(self.x), float(self.y), float(self.z))

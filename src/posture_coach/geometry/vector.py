"""
Immutable 3D point/vector used by every pose-geometry computation.

All operations return new values; nothing mutates its receiver or argument.
"""

import math
from dataclasses import dataclass
from typing import Any

import numpy as np

from ..config import GEOMETRY_EPSILON
from ..exceptions import DegenerateGeometryError


@dataclass(frozen=True)
class Vector3:
    """A 3D point or direction with the algebra pose geometry needs."""

    x: float
    y: float
    z: float

    @classmethod
    def from_landmark(cls, landmark: Any) -> "Vector3":
        """Build from any object exposing ``.x``, ``.y`` and ``.z``."""
        return cls(float(landmark.x), float(landmark.y), float(landmark.z))

    @classmethod
    def from_array(cls, arr) -> "Vector3":
        return cls(float(arr[0]), float(arr[1]), float(arr[2]))

    def to_array(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z], dtype=float)

    # ------------------------------------------------------------------
    # Algebra
    # ------------------------------------------------------------------

    def midpoint(self, other: "Vector3") -> "Vector3":
        return Vector3(
            (self.x + other.x) / 2.0,
            (self.y + other.y) / 2.0,
            (self.z + other.z) / 2.0,
        )

    def add(self, other: "Vector3") -> "Vector3":
        return Vector3(self.x + other.x, self.y + other.y, self.z + other.z)

    def subtract(self, other: "Vector3") -> "Vector3":
        return Vector3(self.x - other.x, self.y - other.y, self.z - other.z)

    def scale(self, factor: float) -> "Vector3":
        return Vector3(self.x * factor, self.y * factor, self.z * factor)

    def cross(self, other: "Vector3") -> "Vector3":
        """Right-hand cross product ``self × other``."""
        return Vector3(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )

    def dot(self, other: "Vector3") -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def magnitude(self) -> float:
        return math.sqrt(self.x ** 2 + self.y ** 2 + self.z ** 2)

    def normalize(self) -> "Vector3":
        """Return the unit vector pointing along ``self``.

        Raises:
            DegenerateGeometryError: If the magnitude is (near) zero or not
                finite, instead of returning NaN/inf components.
        """
        magnitude = self.magnitude()
        if not math.isfinite(magnitude) or magnitude < GEOMETRY_EPSILON:
            raise DegenerateGeometryError(
                f"Cannot normalize vector {self.format(6)} "
                f"(magnitude {magnitude:.3g})"
            )
        return Vector3(self.x / magnitude, self.y / magnitude, self.z / magnitude)

    # ------------------------------------------------------------------
    # Planar measurements
    # ------------------------------------------------------------------

    def angle(self, other: "Vector3", absolute: bool = False) -> float:
        """Angle in degrees of the segment ``self -> other`` in the (x, y) plane.

        Measured with ``atan2`` from the +x axis, so the result lies in
        (-180, 180]; ``absolute`` folds it into [0, 180].
        """
        angle = math.degrees(math.atan2(other.y - self.y, other.x - self.x))
        return abs(angle) if absolute else angle

    def planar_distance(self, other: "Vector3") -> float:
        """Euclidean distance ignoring z."""
        return math.hypot(other.x - self.x, other.y - self.y)

    def distance(self, other: "Vector3") -> float:
        return self.subtract(other).magnitude()

    def isclose(self, other: "Vector3", abs_tol: float = 1e-9) -> bool:
        return (
            math.isclose(self.x, other.x, abs_tol=abs_tol)
            and math.isclose(self.y, other.y, abs_tol=abs_tol)
            and math.isclose(self.z, other.z, abs_tol=abs_tol)
        )

    # ------------------------------------------------------------------
    # Operators & display
    # ------------------------------------------------------------------

    def __add__(self, other: "Vector3") -> "Vector3":
        return self.add(other)

    def __sub__(self, other: "Vector3") -> "Vector3":
        return self.subtract(other)

    def __mul__(self, factor: float) -> "Vector3":
        return self.scale(factor)

    __rmul__ = __mul__

    def __neg__(self) -> "Vector3":
        return Vector3(-self.x, -self.y, -self.z)

    def __iter__(self):
        return iter((self.x, self.y, self.z))

    def format(self, digits: int = 2) -> str:
        return f"({self.x:.{digits}f}, {self.y:.{digits}f}, {self.z:.{digits}f})"

    def __str__(self) -> str:
        return self.format()


ZERO = Vector3(0.0, 0.0, 0.0)

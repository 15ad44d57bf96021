"""
Body-anchored orthonormal coordinate frames.

A frame is built fresh from one pose (e.g. hip line + elbow-to-feet line,
origin at the hip midpoint) so exercise rules can measure angles and offsets
independently of camera placement and subject rotation.
"""

from typing import Iterable, List, Tuple

import numpy as np

from ..config import COLINEAR_EPSILON
from ..exceptions import DegenerateGeometryError
from .vector import Vector3


AXIS_LABELS: Tuple[str, ...] = ("x", "y", "z")

AxisSpec = Tuple[Vector3, str]


class CoordinateFrame:
    """Orthonormal basis plus origin; projects points into local coordinates.

    Two axes are supplied as ``(vector, label)`` pairs. The third axis is
    ``normalize(a × b)`` and takes the unused label. One supplied axis is kept
    exactly and the other is re-derived so the basis stays orthonormal even
    when the supplied vectors are not perpendicular: by default ``b`` becomes
    ``c × a``; with ``keep_second`` ``a`` becomes ``b × c`` instead. Either
    way the re-derived axis keeps its direction within the a-b plane and the
    handedness of (a, b, c) is unchanged.

    Args:
        axis_a: First axis vector and its label ("x", "y" or "z").
        axis_b: Second axis vector and a different label.
        origin: Point that maps to (0, 0, 0).
        keep_second: Keep ``axis_b`` exact and re-derive ``axis_a``.

    Raises:
        ValueError: If labels are invalid or repeated.
        DegenerateGeometryError: If an axis vector is zero-length or the two
            axis vectors are colinear.
    """

    def __init__(
        self,
        axis_a: AxisSpec,
        axis_b: AxisSpec,
        origin: Vector3,
        keep_second: bool = False,
    ):
        vec_a, label_a = axis_a
        vec_b, label_b = axis_b
        if label_a not in AXIS_LABELS or label_b not in AXIS_LABELS:
            raise ValueError(
                f"Axis labels must be one of {AXIS_LABELS}, "
                f"got '{label_a}' and '{label_b}'."
            )
        if label_a == label_b:
            raise ValueError(f"Axis labels must differ, got '{label_a}' twice.")

        a = vec_a.normalize()
        b = vec_b.normalize()
        cross = a.cross(b)
        # a and b are unit vectors, so |a × b| is the sine of the angle between them
        if not cross.magnitude() >= COLINEAR_EPSILON:
            raise DegenerateGeometryError(
                f"Axis vectors {vec_a.format(4)} ({label_a}) and "
                f"{vec_b.format(4)} ({label_b}) are colinear"
            )
        c = cross.normalize()
        if keep_second:
            a = b.cross(c)
        else:
            b = c.cross(a)

        (label_c,) = [label for label in AXIS_LABELS if label not in (label_a, label_b)]
        axes = {label_a: a, label_b: b, label_c: c}

        self.x_axis: Vector3 = axes["x"]
        self.y_axis: Vector3 = axes["y"]
        self.z_axis: Vector3 = axes["z"]
        self.origin: Vector3 = origin
        self._basis = np.array(
            [self.x_axis.to_array(), self.y_axis.to_array(), self.z_axis.to_array()]
        )
        self._origin = origin.to_array()

    @property
    def basis(self) -> np.ndarray:
        """3×3 matrix whose rows are the x, y and z axes."""
        return self._basis.copy()

    def convert(self, point: Vector3) -> Vector3:
        """Project ``point`` into this frame's local coordinates."""
        local = self._basis @ (point.to_array() - self._origin)
        return Vector3.from_array(local)

    def convert_many(self, points: Iterable[Vector3]) -> List[Vector3]:
        return [self.convert(p) for p in points]

    def __repr__(self) -> str:
        return (
            f"CoordinateFrame(x={self.x_axis}, y={self.y_axis}, "
            f"z={self.z_axis}, origin={self.origin})"
        )

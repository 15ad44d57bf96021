"""
2D image-plane helpers (pixel units).

The side plank needs to know which elbow is on the ground before any metric
geometry is built. That decision uses the normalized image landmarks scaled
back to pixels, so both axes share a unit. Results from this module are
:class:`PixelPoint` values, never :class:`Vector3`, to keep pixel and metric
quantities apart.
"""

import logging
import math
from typing import NamedTuple, Tuple

from ..config import GEOMETRY_EPSILON, RIGHT_ANGLE_DEG
from ..exceptions import DegenerateGeometryError
from ..landmarks import BILATERAL_JOINTS, Landmark, LandmarkFrame, Side
from .utils import arccosine

logger = logging.getLogger(__name__)


class PixelPoint(NamedTuple):
    """A point in image pixels (x right, y down)."""

    x: float
    y: float

    def distance(self, other: "PixelPoint") -> float:
        return math.hypot(other.x - self.x, other.y - self.y)

    def midpoint(self, other: "PixelPoint") -> "PixelPoint":
        return PixelPoint((self.x + other.x) / 2.0, (self.y + other.y) / 2.0)


def pixel_point(frame: LandmarkFrame, landmark: Landmark) -> PixelPoint:
    """Scale a normalized image landmark to pixels."""
    x, y, _ = frame.image[landmark]
    return PixelPoint(float(x) * frame.width, float(y) * frame.height)


def shoulders_pixel_midpoint(frame: LandmarkFrame) -> PixelPoint:
    left, right = BILATERAL_JOINTS["shoulders"]
    return pixel_point(frame, left).midpoint(pixel_point(frame, right))


def vertex_angle(a: PixelPoint, vertex: PixelPoint, c: PixelPoint) -> float:
    """Angle at ``vertex`` of triangle (a, vertex, c) by the law of cosines.

    The cosine is taken as ``|cos|``, so the result is folded into [0, 90]:
    an obtuse angle θ comes back as 180 - θ.

    Raises:
        DegenerateGeometryError: If either side meeting at the vertex has zero
            length.
    """
    side_a = a.distance(vertex)
    side_c = vertex.distance(c)
    opposite = a.distance(c)
    if side_a < GEOMETRY_EPSILON or side_c < GEOMETRY_EPSILON:
        raise DegenerateGeometryError(
            f"Zero-length side at vertex ({vertex.x:.1f}, {vertex.y:.1f})"
        )
    cosine = (side_a ** 2 + side_c ** 2 - opposite ** 2) / (2 * side_a * side_c)
    return arccosine(cosine, absolute=True)


def support_deviations(frame: LandmarkFrame) -> Tuple[float, float]:
    """Deviation from 90° of the elbow angle in the shoulder/elbow/heel triangle.

    The shoulder vertex is the shoulders' midpoint; elbow and heel are taken
    per side.

    Returns:
        Tuple of (left deviation, right deviation) in degrees.
    """
    shoulders = shoulders_pixel_midpoint(frame)
    deviations = []
    for side in (Side.LEFT, Side.RIGHT):
        elbow = pixel_point(frame, side.landmark("elbow"))
        heel = pixel_point(frame, side.landmark("heel"))
        angle = vertex_angle(shoulders, elbow, heel)
        deviations.append(abs(RIGHT_ANGLE_DEG - angle))
    return deviations[0], deviations[1]


def detect_grounded_side(frame: LandmarkFrame) -> Side:
    """Side whose elbow supports the body: the one closer to a right angle.

    Ties resolve to the right side.
    """
    left_dev, right_dev = support_deviations(frame)
    side = Side.LEFT if left_dev < right_dev else Side.RIGHT
    logger.debug(
        "Grounded side: %s (deviation left=%.1f°, right=%.1f°)",
        side.value, left_dev, right_dev,
    )
    return side

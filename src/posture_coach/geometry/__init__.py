"""
Geometry primitives for pose analysis.

- ``vector``: immutable Vector3 algebra
- ``frame``: body-anchored orthonormal coordinate frames
- ``utils``: metric midpoints/differences over world landmarks, arccosine
- ``image_plane``: pixel-space helpers (grounded-side detection)
"""

from .frame import CoordinateFrame
from .vector import Vector3

__all__ = [
    "CoordinateFrame",
    "Vector3",
]

"""
Metric (world-space) geometry helpers shared by the exercise validators.

Every helper takes a world landmark array of shape (33, 3) and, optionally, a
:class:`CoordinateFrame`. When a frame is given each landmark is projected
into it *before* the midpoint/difference is taken, so diagnostics can be
computed in raw or body-relative space.

Pixel-space helpers live in :mod:`posture_coach.geometry.image_plane`; do not
mix the two.
"""

from typing import Optional

import numpy as np

from ..landmarks import BILATERAL_JOINTS, Landmark
from .frame import CoordinateFrame
from .vector import Vector3


def landmark_point(
    lm_xyz: np.ndarray,
    landmark: Landmark,
    frame: Optional[CoordinateFrame] = None,
) -> Vector3:
    """Landmark as a Vector3, projected through ``frame`` when given."""
    point = Vector3.from_array(lm_xyz[landmark])
    return frame.convert(point) if frame is not None else point


def bilateral_points(
    lm_xyz: np.ndarray,
    joint: str,
    frame: Optional[CoordinateFrame] = None,
) -> tuple:
    """(left, right) points of a bilateral joint such as ``"knees"``."""
    left, right = BILATERAL_JOINTS[joint]
    return landmark_point(lm_xyz, left, frame), landmark_point(lm_xyz, right, frame)


def bilateral_midpoint(
    lm_xyz: np.ndarray,
    joint: str,
    frame: Optional[CoordinateFrame] = None,
) -> Vector3:
    left, right = bilateral_points(lm_xyz, joint, frame)
    return left.midpoint(right)


def bilateral_difference(
    lm_xyz: np.ndarray,
    joint: str,
    frame: Optional[CoordinateFrame] = None,
) -> Vector3:
    """Left minus right position; non-zero x/y means the pair is twisted or tilted."""
    left, right = bilateral_points(lm_xyz, joint, frame)
    return left.subtract(right)


def shoulders_midpoint(lm_xyz, frame=None) -> Vector3:
    return bilateral_midpoint(lm_xyz, "shoulders", frame)


def hips_midpoint(lm_xyz, frame=None) -> Vector3:
    return bilateral_midpoint(lm_xyz, "hips", frame)


def knees_midpoint(lm_xyz, frame=None) -> Vector3:
    return bilateral_midpoint(lm_xyz, "knees", frame)


def heels_midpoint(lm_xyz, frame=None) -> Vector3:
    return bilateral_midpoint(lm_xyz, "heels", frame)


def elbows_midpoint(lm_xyz, frame=None) -> Vector3:
    return bilateral_midpoint(lm_xyz, "elbows", frame)


def wrists_midpoint(lm_xyz, frame=None) -> Vector3:
    return bilateral_midpoint(lm_xyz, "wrists", frame)


def foot_indices_midpoint(lm_xyz, frame=None) -> Vector3:
    return bilateral_midpoint(lm_xyz, "foot_indices", frame)


def arccosine(cosine: float, degrees: bool = True, absolute: bool = False) -> float:
    """Arc-cosine that tolerates floating-point overshoot.

    Args:
        cosine: Cosine value; clamped to [-1, 1] before ``arccos``.
        degrees: Return degrees (default) instead of radians.
        absolute: Take ``|cosine|`` first, folding the result into [0, 90].

    Returns:
        float: The angle.
    """
    if absolute:
        cosine = abs(cosine)
    angle = np.arccos(np.clip(cosine, -1.0, 1.0))
    if degrees:
        angle = np.degrees(angle)
    return float(angle)

"""
Landmark dictionary and the per-frame landmark record consumed by validators.

The 33-point body topology is fixed; every frame carries the full set in two
parallel arrays:

  - ``image``: x, y normalized to [0, 1] by image width/height, z relative depth
  - ``world``: metric, hip-centred x, y, z

plus the source image size in pixels and, when the pose estimator reports it,
a per-landmark visibility score.
"""

import logging
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Any, Iterable, Optional, Sequence

import numpy as np

from .config import COORDS_PER_LANDMARK, NUM_LANDMARKS, VISIBILITY_THRESHOLD
from .exceptions import MissingLandmarkError
from .geometry.vector import Vector3

logger = logging.getLogger(__name__)


class Landmark(IntEnum):
    """Anatomical landmark → index in the 33-point topology."""

    NOSE = 0
    LEFT_EYE_INNER = 1
    LEFT_EYE = 2
    LEFT_EYE_OUTER = 3
    RIGHT_EYE_INNER = 4
    RIGHT_EYE = 5
    RIGHT_EYE_OUTER = 6
    LEFT_EAR = 7
    RIGHT_EAR = 8
    MOUTH_LEFT = 9
    MOUTH_RIGHT = 10
    LEFT_SHOULDER = 11
    RIGHT_SHOULDER = 12
    LEFT_ELBOW = 13
    RIGHT_ELBOW = 14
    LEFT_WRIST = 15
    RIGHT_WRIST = 16
    LEFT_PINKY = 17
    RIGHT_PINKY = 18
    LEFT_INDEX = 19
    RIGHT_INDEX = 20
    LEFT_THUMB = 21
    RIGHT_THUMB = 22
    LEFT_HIP = 23
    RIGHT_HIP = 24
    LEFT_KNEE = 25
    RIGHT_KNEE = 26
    LEFT_ANKLE = 27
    RIGHT_ANKLE = 28
    LEFT_HEEL = 29
    RIGHT_HEEL = 30
    LEFT_FOOT_INDEX = 31
    RIGHT_FOOT_INDEX = 32


class Side(str, Enum):
    LEFT = "left"
    RIGHT = "right"

    def landmark(self, joint: str) -> Landmark:
        """Resolve a joint name (e.g. ``"elbow"``) to this side's landmark."""
        return Landmark[f"{self.name}_{joint.upper()}"]


# Bilateral joints addressable by name → (left, right)
BILATERAL_JOINTS = {
    "shoulders": (Landmark.LEFT_SHOULDER, Landmark.RIGHT_SHOULDER),
    "elbows": (Landmark.LEFT_ELBOW, Landmark.RIGHT_ELBOW),
    "wrists": (Landmark.LEFT_WRIST, Landmark.RIGHT_WRIST),
    "hips": (Landmark.LEFT_HIP, Landmark.RIGHT_HIP),
    "knees": (Landmark.LEFT_KNEE, Landmark.RIGHT_KNEE),
    "heels": (Landmark.LEFT_HEEL, Landmark.RIGHT_HEEL),
    "foot_indices": (Landmark.LEFT_FOOT_INDEX, Landmark.RIGHT_FOOT_INDEX),
}


def _as_landmark_array(arr: Any, name: str) -> tuple:
    """Validate a (33, 3) or (33, 4) array; split off the visibility column.

    Returns:
        Tuple of (xyz float array (33, 3), visibility (33,) or None).

    Raises:
        MissingLandmarkError: On wrong shape or non-finite coordinates.
    """
    if arr is None:
        raise MissingLandmarkError(f"No {name} landmarks in frame")
    arr = np.asarray(arr, dtype=float)
    if arr.ndim != 2 or arr.shape[1] not in (COORDS_PER_LANDMARK, COORDS_PER_LANDMARK + 1):
        raise MissingLandmarkError(
            f"{name} landmarks must have shape ({NUM_LANDMARKS}, 3) or "
            f"({NUM_LANDMARKS}, 4), got {arr.shape}"
        )
    if arr.shape[0] != NUM_LANDMARKS:
        raise MissingLandmarkError(
            f"Expected {NUM_LANDMARKS} {name} landmarks, got {arr.shape[0]}"
        )
    xyz = arr[:, :COORDS_PER_LANDMARK].copy()
    visibility = arr[:, COORDS_PER_LANDMARK].copy() if arr.shape[1] > COORDS_PER_LANDMARK else None
    bad = ~np.isfinite(xyz).all(axis=1)
    if bad.any():
        raise MissingLandmarkError(
            f"Non-finite {name} coordinates",
            [Landmark(int(i)).name for i in np.flatnonzero(bad)],
        )
    return xyz, visibility


def _landmark_sequence(container: Any) -> Optional[list]:
    """Unwrap the landmark containers the pose estimator hands out.

    Handles ``NormalizedLandmarkList`` objects (``.landmark``) from the legacy
    solutions API and the per-pose nested lists from the Tasks API.
    """
    if container is None:
        return None
    if hasattr(container, "landmark"):
        return list(container.landmark)
    items = list(container)
    if not items:
        return None
    if not hasattr(items[0], "x"):
        # Tasks API: one list of landmarks per detected pose; use the first
        return _landmark_sequence(items[0])
    return items


def _landmarks_to_array(landmarks: Sequence[Any]) -> np.ndarray:
    rows = []
    for lm in landmarks:
        visibility = getattr(lm, "visibility", None)
        rows.append([
            lm.x, lm.y, lm.z,
            1.0 if visibility is None else visibility,
        ])
    return np.asarray(rows, dtype=float)


@dataclass(frozen=True, eq=False)
class LandmarkFrame:
    """One pose-estimation result: image + world landmarks and image size.

    Immutable for the duration of a validation call. Construct with
    :meth:`from_arrays` or :meth:`from_mediapipe`; both validate the input and
    raise :class:`MissingLandmarkError` instead of letting a missing landmark
    read as (0, 0, 0).
    """

    image: np.ndarray
    world: np.ndarray
    width: int
    height: int
    visibility: Optional[np.ndarray] = None

    def __post_init__(self):
        image, image_vis = _as_landmark_array(self.image, "image")
        world, _ = _as_landmark_array(self.world, "world")
        if self.width <= 0 or self.height <= 0:
            raise MissingLandmarkError(
                f"Image size must be positive, got {self.width}x{self.height}"
            )
        visibility = self.visibility if self.visibility is not None else image_vis
        if visibility is not None:
            visibility = np.array(visibility, dtype=float).reshape(-1)
            if visibility.shape[0] != NUM_LANDMARKS:
                raise MissingLandmarkError(
                    f"Expected {NUM_LANDMARKS} visibility scores, got {visibility.shape[0]}"
                )
            bad = ~np.isfinite(visibility)
            if bad.any():
                raise MissingLandmarkError(
                    "Non-finite visibility scores",
                    [Landmark(int(i)).name for i in np.flatnonzero(bad)],
                )
            visibility.setflags(write=False)
        image.setflags(write=False)
        world.setflags(write=False)
        object.__setattr__(self, "image", image)
        object.__setattr__(self, "world", world)
        object.__setattr__(self, "visibility", visibility)

    @classmethod
    def from_arrays(cls, image, world, width: int, height: int) -> "LandmarkFrame":
        """Build from (33, 3) or (33, 4) arrays; a 4th image column is visibility."""
        return cls(image=image, world=world, width=int(width), height=int(height))

    @classmethod
    def from_mediapipe(cls, results: Any, width: int, height: int) -> "LandmarkFrame":
        """Build from a pose-estimator result object.

        Accepts either the legacy ``solutions.pose`` result
        (``pose_landmarks`` / ``pose_world_landmarks`` with ``.landmark``) or a
        Tasks API ``PoseLandmarkerResult`` (lists per detected pose).

        Raises:
            MissingLandmarkError: If no pose was detected.
        """
        image = _landmark_sequence(getattr(results, "pose_landmarks", None))
        world = _landmark_sequence(getattr(results, "pose_world_landmarks", None))
        if image is None or world is None:
            raise MissingLandmarkError("No pose detected in frame")
        return cls.from_arrays(
            _landmarks_to_array(image), _landmarks_to_array(world)[:, :COORDS_PER_LANDMARK],
            width, height,
        )

    # ------------------------------------------------------------------
    # Access
    # ------------------------------------------------------------------

    def world_point(self, landmark: Landmark) -> Vector3:
        return Vector3.from_array(self.world[landmark])

    def require(
        self,
        landmarks: Iterable[Landmark],
        min_visibility: float = VISIBILITY_THRESHOLD,
    ) -> None:
        """Fail unless every landmark in ``landmarks`` is visible enough.

        Frames without visibility scores are trusted as-is.

        Raises:
            MissingLandmarkError: Listing every landmark below ``min_visibility``.
        """
        if self.visibility is None:
            return
        unreliable = [
            Landmark(lm).name for lm in landmarks
            if self.visibility[lm] < min_visibility
        ]
        if unreliable:
            logger.debug(
                "Rejecting frame: %d landmark(s) below visibility %.2f",
                len(unreliable), min_visibility,
            )
            raise MissingLandmarkError(
                f"Landmarks below visibility {min_visibility:.2f}", unreliable
            )

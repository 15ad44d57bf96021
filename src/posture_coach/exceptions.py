"""
Error taxonomy for the posture coach core.

All errors are per-frame and recoverable: callers drop the frame (or the
exercise selection) and carry on. A non-empty corrective message is normal
output, never an exception.
"""

from typing import Iterable


class PostureCoachError(Exception):
    """Base class for every error raised by this package."""


class DegenerateGeometryError(PostureCoachError, ValueError):
    """A vector collapsed to (near) zero length or two axes were colinear."""


class UnsupportedExerciseError(PostureCoachError, ValueError):
    """An exercise id outside the supported enumeration was requested."""

    def __init__(self, exercise):
        self.exercise = exercise
        super().__init__(f"Unsupported exercise: {exercise!r}")


class MissingLandmarkError(PostureCoachError, ValueError):
    """A frame lacks required landmarks or carries unreliable ones."""

    def __init__(self, message: str, landmarks: Iterable[str] = ()):
        self.landmarks = tuple(landmarks)
        if self.landmarks:
            message = f"{message}: {', '.join(self.landmarks)}"
        super().__init__(message)

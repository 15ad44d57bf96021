"""
Posture coach core: per-frame exercise posture validation.

Consumes one pose-estimation result (33 image + world landmarks) and returns
the single most relevant corrective instruction for the selected exercise:
    1. Build a body-anchored coordinate frame from world landmarks
    2. Derive bilateral differences and mid-line angles
    3. Walk the exercise's ordered rule cascade; the first violation wins
"""

from .exceptions import (
    DegenerateGeometryError,
    MissingLandmarkError,
    PostureCoachError,
    UnsupportedExerciseError,
)
from .exercises import Exercise
from .geometry import CoordinateFrame, Vector3
from .landmarks import Landmark, LandmarkFrame, Side
from .thresholds import ThresholdsConfig, load_thresholds
from .validators import ValidationResult, Validator, ValidatorRegistry

__version__ = "0.1.0"

__all__ = [
    "DegenerateGeometryError",
    "MissingLandmarkError",
    "PostureCoachError",
    "UnsupportedExerciseError",
    "Exercise",
    "CoordinateFrame",
    "Vector3",
    "Landmark",
    "LandmarkFrame",
    "Side",
    "ThresholdsConfig",
    "load_thresholds",
    "ValidationResult",
    "Validator",
    "ValidatorRegistry",
]

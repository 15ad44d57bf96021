"""
Configuration constants for the posture coach core.

Centralizes landmark topology size, numeric tolerances, the threshold-table
location, and environment variable loading.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

# ---------------------------------------------------------------------------
# Project paths
# ---------------------------------------------------------------------------
PACKAGE_DIR = Path(__file__).resolve().parent
PROJECT_ROOT = PACKAGE_DIR.parent.parent
_ENV_PATH = PROJECT_ROOT / ".env"
load_dotenv(_ENV_PATH)

# ---------------------------------------------------------------------------
# Threshold tables
# ---------------------------------------------------------------------------
DEFAULT_THRESHOLDS_PATH = PACKAGE_DIR / "configs" / "thresholds.yaml"
THRESHOLDS_PATH = Path(
    os.environ.get("POSTURE_COACH_THRESHOLDS", str(DEFAULT_THRESHOLDS_PATH))
)

# ---------------------------------------------------------------------------
# Landmark topology
# ---------------------------------------------------------------------------
NUM_LANDMARKS: int = 33         # standard 33-point body topology
COORDS_PER_LANDMARK: int = 3    # x, y, z (an optional 4th column is visibility)

# ---------------------------------------------------------------------------
# Numeric tolerances
# ---------------------------------------------------------------------------
GEOMETRY_EPSILON: float = 1e-9  # below this a vector is treated as zero-length
COLINEAR_EPSILON: float = 1e-6  # min sine of the angle between two frame axes
RIGHT_ANGLE_DEG: float = 90.0

# Landmarks reported below this visibility are rejected instead of trusted
VISIBILITY_THRESHOLD: float = float(
    os.environ.get("POSTURE_COACH_VISIBILITY_THRESHOLD", "0.5")
)

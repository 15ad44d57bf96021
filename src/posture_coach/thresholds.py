"""
Per-exercise threshold tables.

Tolerances, angle bands, corrective messages and cascade order are data: they
are read from ``configs/thresholds.yaml`` (or the file named by
``POSTURE_COACH_THRESHOLDS``) and validated with pydantic, so each value can be
tuned and tested independently of the rule logic that consumes it.
"""

import logging
from pathlib import Path
from typing import Optional, Union

import yaml
from pydantic import BaseModel, Field, model_validator

from .config import THRESHOLDS_PATH

logger = logging.getLogger(__name__)


# ============================================================================
# Building blocks
# ============================================================================

class AngleBand(BaseModel):
    """Inclusive [min, max] band in degrees."""
    min: float
    max: float

    @model_validator(mode="after")
    def _check_order(self):
        if self.min > self.max:
            raise ValueError(f"Angle band min ({self.min}) exceeds max ({self.max})")
        return self

    def contains(self, angle: float) -> bool:
        return self.min <= angle <= self.max


class AlignmentTolerance(BaseModel):
    """Largest accepted |Δx| and |Δy| between a left/right landmark pair (metres)."""
    max_dx: float = Field(gt=0.0)
    max_dy: float = Field(gt=0.0)


# ============================================================================
# Exercise tables
# ============================================================================

class PlankThresholds(BaseModel):
    alignment: AlignmentTolerance
    shoulder_hip: AngleBand
    shoulder_knee: AngleBand
    shoulder_heel: AngleBand
    hip_knee_margin: float = Field(
        ge=0.0, description="Shoulder-hip angle may exceed shoulder-knee angle by this much"
    )
    knee_heel_margin: float = Field(
        ge=0.0, description="Shoulder-knee angle may exceed shoulder-heel angle by this much"
    )
    support_tolerance: float = Field(
        gt=0.0, description="Allowed deviation of shoulder-elbow angle from 90°"
    )
    messages: dict[str, str]
    cascade: Optional[list[str]] = Field(
        default=None, description="Rule names in priority order; None keeps the default"
    )


class SidePlankThresholds(BaseModel):
    alignment: AlignmentTolerance
    shoulder_hip: AngleBand
    shoulder_knee: AngleBand
    shoulder_heel: AngleBand
    knee_below_hip_margin: float = Field(
        ge=0.0, description="Shoulder-hip angle may exceed shoulder-knee angle by this much"
    )
    knee_above_hip_margin: float = Field(
        ge=0.0, description="Shoulder-knee angle may exceed shoulder-hip angle by this much"
    )
    hip_heel_margin: float = Field(
        ge=0.0, description="Largest accepted |shoulder-hip − shoulder-heel| angle"
    )
    support_tolerance: float = Field(
        gt=0.0, description="Allowed deviation of grounded shoulder-elbow angle from 90°"
    )
    messages: dict[str, str]
    cascade: Optional[list[str]] = None


class ThresholdsConfig(BaseModel):
    plank: PlankThresholds
    side_plank: SidePlankThresholds


# ============================================================================
# Loading
# ============================================================================

def load_thresholds(config_path: Optional[Union[str, Path]] = None) -> ThresholdsConfig:
    """Load and validate the threshold tables from YAML.

    Args:
        config_path: YAML file; defaults to ``THRESHOLDS_PATH``.

    Returns:
        ThresholdsConfig: Validated tables for every exercise.

    Raises:
        FileNotFoundError: If the file does not exist.
        pydantic.ValidationError: If a value is missing or out of range.
    """
    path = Path(config_path) if config_path is not None else THRESHOLDS_PATH
    if not path.exists():
        raise FileNotFoundError(f"Threshold config not found: {path}")
    with open(path, "r") as f:
        raw = yaml.safe_load(f) or {}
    config = ThresholdsConfig.model_validate(raw)
    logger.info("Loaded threshold tables from %s", path)
    return config

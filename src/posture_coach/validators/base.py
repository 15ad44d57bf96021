"""
Shared rule engine for exercise validators.

A validator turns one :class:`LandmarkFrame` into named diagnostics (bilateral
difference vectors and mid-line angles), then walks an ordered list of
:class:`Rule` records. The first violated rule supplies the corrective
message; if none fires the posture is accepted for this frame.

Rules are plain ``(name, message, violated)`` records built by the factories
below from a threshold table, so cascade order and every tolerance are data.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Callable, NamedTuple, Optional, Sequence

from ..config import RIGHT_ANGLE_DEG, VISIBILITY_THRESHOLD
from ..exercises import Exercise
from ..geometry.vector import Vector3
from ..landmarks import Landmark, LandmarkFrame
from ..thresholds import AlignmentTolerance, AngleBand

logger = logging.getLogger(__name__)


# ============================================================================
# Data records
# ============================================================================

@dataclass(frozen=True)
class Diagnostics:
    """Named geometry derived from one frame, in insertion order."""
    vectors: dict[str, Vector3] = field(default_factory=dict)
    angles: dict[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class ValidationResult:
    """Verdict for one frame.

    ``message`` is empty when the posture is accepted. The diagnostics are
    carried along so a presentation layer can draw them; only the message
    decides pass/fail.
    """
    message: str
    diagnostic_vectors: tuple[Vector3, ...] = ()
    diagnostic_angles: tuple[float, ...] = ()
    failed_rule: Optional[str] = None

    @property
    def passed(self) -> bool:
        return not self.message


class Rule(NamedTuple):
    name: str
    message: str
    violated: Callable[[Diagnostics], bool]


# ============================================================================
# Rule factories
# ============================================================================

def alignment_rule(name: str, message: str, vector: str, tolerance: AlignmentTolerance) -> Rule:
    """Left/right pair drifted apart in x or y (out-of-plane twist or tilt)."""
    def violated(diag: Diagnostics) -> bool:
        diff = diag.vectors[vector]
        return abs(diff.x) > tolerance.max_dx or abs(diff.y) > tolerance.max_dy
    return Rule(name, message, violated)


def band_rule(name: str, message: str, angle: str, band: AngleBand) -> Rule:
    """Mid-line angle outside its inclusive band."""
    def violated(diag: Diagnostics) -> bool:
        return not band.contains(diag.angles[angle])
    return Rule(name, message, violated)


def ordering_rule(name: str, message: str, lower: str, upper: str, margin: float) -> Rule:
    """``angles[upper]`` exceeds ``angles[lower]`` by more than ``margin``."""
    def violated(diag: Diagnostics) -> bool:
        return diag.angles[lower] + margin < diag.angles[upper]
    return Rule(name, message, violated)


def spread_rule(name: str, message: str, first: str, second: str, margin: float) -> Rule:
    """Two angles differ by more than ``margin`` in either direction."""
    def violated(diag: Diagnostics) -> bool:
        return abs(diag.angles[first] - diag.angles[second]) > margin
    return Rule(name, message, violated)


def support_rule(name: str, message: str, angle: str, tolerance: float) -> Rule:
    """Supporting limb is more than ``tolerance`` away from perpendicular."""
    def violated(diag: Diagnostics) -> bool:
        return abs(RIGHT_ANGLE_DEG - abs(diag.angles[angle])) > tolerance
    return Rule(name, message, violated)


def evaluate_cascade(rules: Sequence[Rule], diagnostics: Diagnostics) -> Optional[Rule]:
    """Return the first violated rule, or None when every rule passes."""
    for rule in rules:
        if rule.violated(diagnostics):
            return rule
    return None


def order_rules(rules: Sequence[Rule], cascade: Optional[Sequence[str]]) -> list[Rule]:
    """Arrange ``rules`` by the names in ``cascade``; None keeps the given order.

    Raises:
        ValueError: If ``cascade`` names an unknown rule or repeats one.
    """
    if cascade is None:
        return list(rules)
    by_name = {rule.name: rule for rule in rules}
    unknown = [name for name in cascade if name not in by_name]
    if unknown:
        raise ValueError(
            f"Unknown rule(s) in cascade: {unknown}. Known rules: {list(by_name)}"
        )
    if len(set(cascade)) != len(cascade):
        raise ValueError(f"Cascade lists a rule more than once: {list(cascade)}")
    return [by_name[name] for name in cascade]


# ============================================================================
# Validator
# ============================================================================

class Validator(ABC):
    """Rule engine for one exercise.

    Subclasses declare the landmarks they read, how to derive diagnostics and
    which rules a threshold table yields. Instances hold only the immutable
    rule list, so one instance can serve every frame.
    """

    exercise: Exercise
    required_landmarks: tuple[Landmark, ...] = ()

    def __init__(self, thresholds, min_visibility: float = VISIBILITY_THRESHOLD):
        self.thresholds = thresholds
        self.min_visibility = min_visibility
        self.rules: tuple[Rule, ...] = tuple(
            order_rules(self.build_rules(thresholds), thresholds.cascade)
        )

    def message(self, name: str) -> str:
        """Corrective message configured for rule ``name``.

        Raises:
            ValueError: If the threshold table has no message for it.
        """
        try:
            return self.thresholds.messages[name]
        except KeyError:
            raise ValueError(
                f"No message configured for {self.exercise.value} rule '{name}'"
            ) from None

    @abstractmethod
    def build_rules(self, thresholds) -> list[Rule]:
        """Turn a threshold table into rules, in default priority order."""

    @abstractmethod
    def diagnose(self, frame: LandmarkFrame) -> Diagnostics:
        """Derive the named diagnostics for one frame."""

    def validate(self, frame: LandmarkFrame) -> ValidationResult:
        """Evaluate one frame.

        Raises:
            MissingLandmarkError: If a required landmark is unreliable.
            DegenerateGeometryError: If the body frame cannot be built.
        """
        frame.require(self.required_landmarks, self.min_visibility)
        diagnostics = self.diagnose(frame)
        rule = evaluate_cascade(self.rules, diagnostics)
        if rule is not None:
            logger.debug("%s: rule '%s' fired", self.exercise.value, rule.name)
        return ValidationResult(
            message=rule.message if rule is not None else "",
            diagnostic_vectors=tuple(diagnostics.vectors.values()),
            diagnostic_angles=tuple(diagnostics.angles.values()),
            failed_rule=rule.name if rule is not None else None,
        )

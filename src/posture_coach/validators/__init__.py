"""
Per-exercise posture validators and their registry.
"""

from .base import Diagnostics, Rule, ValidationResult, Validator, evaluate_cascade
from .plank import PlankValidator
from .registry import VALIDATOR_CLASSES, ValidatorRegistry
from .side_plank import SidePlankValidator

__all__ = [
    "Diagnostics",
    "Rule",
    "ValidationResult",
    "Validator",
    "evaluate_cascade",
    "PlankValidator",
    "SidePlankValidator",
    "VALIDATOR_CLASSES",
    "ValidatorRegistry",
]

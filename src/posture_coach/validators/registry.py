"""
Exercise → validator dispatch.

The registry is constructed explicitly (once per application) and handed to
the frame loop. Validators are stateless, so each is built lazily on first use
and reused for every later frame.
"""

import logging
from typing import Optional, Union

from ..exceptions import DegenerateGeometryError, MissingLandmarkError, UnsupportedExerciseError
from ..exercises import Exercise
from ..landmarks import LandmarkFrame
from ..thresholds import ThresholdsConfig, load_thresholds
from .base import ValidationResult, Validator
from .plank import PlankValidator
from .side_plank import SidePlankValidator

logger = logging.getLogger(__name__)

VALIDATOR_CLASSES: dict[Exercise, type[Validator]] = {
    Exercise.PLANK: PlankValidator,
    Exercise.SIDE_PLANK: SidePlankValidator,
}


class ValidatorRegistry:
    """Builds each exercise's validator at most once and caches it.

    Args:
        thresholds: Threshold tables for every exercise; loaded from the
            configured YAML when omitted.
    """

    def __init__(self, thresholds: Optional[ThresholdsConfig] = None):
        self.thresholds = thresholds if thresholds is not None else load_thresholds()
        self._validators: dict[Exercise, Validator] = {}

    @staticmethod
    def supported_exercises() -> list[Exercise]:
        return list(VALIDATOR_CLASSES)

    def get_validator(self, exercise: Union[Exercise, str]) -> Validator:
        """Return the cached validator for ``exercise``, building it on first use.

        Raises:
            UnsupportedExerciseError: If ``exercise`` has no registered validator.
        """
        exercise = Exercise.parse(exercise)
        validator = self._validators.get(exercise)
        if validator is None:
            validator_cls = VALIDATOR_CLASSES.get(exercise)
            if validator_cls is None:
                raise UnsupportedExerciseError(exercise)
            validator = validator_cls(getattr(self.thresholds, exercise.value))
            self._validators[exercise] = validator
            logger.info("Built %s for '%s'", validator_cls.__name__, exercise.value)
        return validator

    def validate(self, exercise: Union[Exercise, str], frame: LandmarkFrame) -> ValidationResult:
        return self.get_validator(exercise).validate(frame)

    def try_validate(
        self,
        exercise: Union[Exercise, str],
        frame: LandmarkFrame,
    ) -> Optional[ValidationResult]:
        """Like :meth:`validate`, but an unusable frame yields None.

        Degenerate geometry and missing landmarks mean "no feedback this
        frame"; configuration errors such as an unsupported exercise still
        raise.
        """
        validator = self.get_validator(exercise)
        try:
            return validator.validate(frame)
        except (DegenerateGeometryError, MissingLandmarkError) as e:
            logger.warning("Skipping frame for '%s': %s", validator.exercise.value, e)
            return None

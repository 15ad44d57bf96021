"""
Closed set of exercises the core can validate.
"""

from enum import Enum
from typing import Union

from .exceptions import UnsupportedExerciseError


class Exercise(str, Enum):
    PLANK = "plank"
    SIDE_PLANK = "side_plank"

    @property
    def display_name(self) -> str:
        return EXERCISE_DISPLAY_NAMES[self]

    @classmethod
    def parse(cls, value: Union["Exercise", str]) -> "Exercise":
        """Accept an Exercise or its string id (``"side_plank"``).

        Raises:
            UnsupportedExerciseError: For anything outside the enumeration.
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise UnsupportedExerciseError(value) from None


EXERCISE_DISPLAY_NAMES: dict[Exercise, str] = {
    Exercise.PLANK: "Plank",
    Exercise.SIDE_PLANK: "Side Plank",
}

"""Shared vocabulary for the quiz session engine.

Closed enumerations and immutable records used by the generator, the scoring
engine, the countdown bar, the results aggregator and the session state
machine. Nothing here touches the terminal or real time.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from enum import Enum


class SessionPhase(str, Enum):
    MENU = "menu"
    TIME_SELECT = "time_select"
    RUNNING = "running"
    RESULTS = "results"


class Difficulty(str, Enum):
    FIRST_GRADE = "1st Grade"
    THIRD_GRADE = "3rd Grade"
    FIFTH_GRADE = "5th Grade"
    ALGEBRA = "Algebra"

    @property
    def description(self) -> str:
        return _DIFFICULTY_DESCRIPTIONS[self]


_DIFFICULTY_DESCRIPTIONS: dict[Difficulty, str] = {
    Difficulty.FIRST_GRADE: "Basic single-digit addition and subtraction",
    Difficulty.THIRD_GRADE: "Larger numbers and simple multiplication",
    Difficulty.FIFTH_GRADE: "Two-digit operations",
    Difficulty.ALGEBRA: "Variables and expressions",
}


ALGEBRA_PREFIX = "algebra_"


class OpType(str, Enum):
    ADDITION = "addition"
    SUBTRACTION = "subtraction"
    MULTIPLICATION = "multiplication"
    DIVISION = "division"
    ALGEBRA_ADDITION = "algebra_addition"
    ALGEBRA_SUBTRACTION = "algebra_subtraction"
    ALGEBRA_MULTIPLICATION = "algebra_multiplication"
    ALGEBRA_DIVISION = "algebra_division"

    @property
    def is_algebra(self) -> bool:
        return self.value.startswith(ALGEBRA_PREFIX)

    @property
    def label(self) -> str:
        """Label used in the per-operation statistics."""
        if self.is_algebra:
            return f"algebra ({self.value[len(ALGEBRA_PREFIX):]})"
        return self.value


class ColorOverride(str, Enum):
    NONE = "none"
    BRIGHT_POSITIVE = "bright-positive"
    BRIGHT_NEGATIVE = "bright-negative"


class Polarity(str, Enum):
    CORRECT = "correct"
    INCORRECT = "incorrect"


@dataclass(frozen=True, slots=True)
class DurationChoice:
    label: str
    description: str
    seconds: int


DURATION_CHOICES: tuple[DurationChoice, ...] = (
    DurationChoice("30s", "Brain Storm", 30),
    DurationChoice("60s", "Normal Person", 60),
    DurationChoice("90s", "Ok, Boomer", 90),
    DurationChoice("2m", "Marathon", 120),
)


@dataclass(frozen=True, slots=True)
class Question:
    text: str
    answer: int
    op_type: OpType
    id: str


@dataclass(frozen=True, slots=True)
class AnswerRecord:
    question: Question
    correct: bool
    elapsed_s: float
    raw_input: str


@dataclass(frozen=True, slots=True)
class TimeBudget:
    limit_s: int
    remaining_s: int

    @property
    def expired(self) -> bool:
        return self.remaining_s <= 0


@dataclass(frozen=True, slots=True)
class FlashState:
    """Post-answer feedback shown for about a second."""

    active: bool = False
    polarity: Polarity = Polarity.CORRECT
    bar_adjust: int = 0  # -1, 0 or +1
    fade_steps_left: int = 0
    color_override: ColorOverride = ColorOverride.NONE
    text: str = ""


class SeededRng:
    """Seeded RNG wrapper to keep deterministic streams explicit."""

    def __init__(self, seed: int) -> None:
        self._rng = random.Random(int(seed))

    def randint(self, a: int, b: int) -> int:
        return self._rng.randint(a, b)

    def coin(self) -> bool:
        return self._rng.randint(0, 1) == 0

    def choice(self, seq: tuple[str, ...]) -> str:
        return self._rng.choice(seq)

    def token(self) -> int:
        """Non-negative 63-bit draw used for question ids."""
        return self._rng.getrandbits(63)

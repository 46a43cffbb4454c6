from __future__ import annotations

import re
from dataclasses import dataclass

from .quiz_core import AnswerRecord, ColorOverride, FlashState, Polarity, Question, TimeBudget

FLASH_FADE_STEPS = 3
CORRECT_TEXT = "Correct!"
INCORRECT_TEXT = "Incorrect!"

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")


@dataclass(frozen=True, slots=True)
class ScoreOutcome:
    record: AnswerRecord
    budget: TimeBudget
    flash: FlashState

    @property
    def correct(self) -> bool:
        return self.record.correct


def parse_answer(raw: str) -> int | None:
    """Read a plain ASCII integer with an optional sign, else None."""
    s = raw.strip()
    if not _INTEGER_RE.fullmatch(s):
        return None
    return int(s)


def score_answer(
    *,
    question: Question,
    raw: str,
    elapsed_s: float,
    budget: TimeBudget,
    fade_steps: int = FLASH_FADE_STEPS,
) -> ScoreOutcome | None:
    """Score a submitted answer.

    Returns None when ``raw`` is not an integer; nothing is recorded then.
    A correct answer adds a second to the budget (capped at the limit), an
    incorrect one takes a second off (never below one second).
    """

    value = parse_answer(raw)
    if value is None:
        return None

    correct = value == question.answer
    record = AnswerRecord(
        question=question,
        correct=correct,
        elapsed_s=max(0.0, float(elapsed_s)),
        raw_input=raw,
    )

    if correct:
        remaining = min(budget.remaining_s + 1, budget.limit_s)
        flash = FlashState(
            active=True,
            polarity=Polarity.CORRECT,
            bar_adjust=1,
            fade_steps_left=fade_steps,
            color_override=ColorOverride.BRIGHT_POSITIVE,
            text=CORRECT_TEXT,
        )
    else:
        remaining = max(budget.remaining_s - 1, 1)
        flash = FlashState(
            active=True,
            polarity=Polarity.INCORRECT,
            bar_adjust=-1,
            fade_steps_left=fade_steps,
            color_override=ColorOverride.BRIGHT_NEGATIVE,
            text=INCORRECT_TEXT,
        )

    return ScoreOutcome(
        record=record,
        budget=TimeBudget(limit_s=budget.limit_s, remaining_s=remaining),
        flash=flash,
    )

"""Question generation for each difficulty tier.

Every question carries an id made of the difficulty label and a fresh random
draw. ``QuestionGenerator.generate`` keeps drawing until the id is absent from
the caller's used-id set and registers the id it returns, so the caller must
pass the same set for the whole episode. Only ids are unique: the same
problem text may come up again under a new id.
"""

from __future__ import annotations

import logging

from .quiz_core import Difficulty, OpType, Question, SeededRng

logger = logging.getLogger(__name__)

OP_SYMBOLS: dict[OpType, str] = {
    OpType.ADDITION: "+",
    OpType.SUBTRACTION: "-",
    OpType.MULTIPLICATION: "*",
    OpType.DIVISION: "/",
}

_THIRD_GRADE_OPS = (OpType.ADDITION, OpType.SUBTRACTION, OpType.MULTIPLICATION)
_FIFTH_GRADE_OPS = (OpType.ADDITION, OpType.SUBTRACTION, OpType.MULTIPLICATION, OpType.DIVISION)

ALGEBRA_TEMPLATE_COUNT = 7


def _arithmetic(a: int, op: OpType, b: int, answer: int) -> tuple[str, int, OpType]:
    return f"{a} {OP_SYMBOLS[op]} {b} = ?", answer, op


def _algebra(equation: str, answer: int, op: OpType) -> tuple[str, int, OpType]:
    return f"{equation}. What is x?", answer, op


class QuestionGenerator:
    """Generates unique arithmetic/algebra questions from an injected RNG."""

    def __init__(self, rng: SeededRng) -> None:
        self._rng = rng

    def generate(self, difficulty: Difficulty | str, used_ids: set[str]) -> Question:
        label = difficulty.value if isinstance(difficulty, Difficulty) else str(difficulty)
        while True:
            text, answer, op_type = self._draw(label)
            qid = f"{label}|{self._rng.token()}"
            if qid in used_ids:
                continue
            used_ids.add(qid)
            return Question(text=text, answer=answer, op_type=op_type, id=qid)

    def _draw(self, label: str) -> tuple[str, int, OpType]:
        if label == Difficulty.FIRST_GRADE.value:
            return self._first_grade()
        if label == Difficulty.THIRD_GRADE.value:
            return self._third_grade()
        if label == Difficulty.FIFTH_GRADE.value:
            return self._fifth_grade()
        if label == Difficulty.ALGEBRA.value:
            return self._algebra()
        logger.debug("unknown difficulty %r, falling back to addition", label)
        return self._fallback()

    def _first_grade(self) -> tuple[str, int, OpType]:
        a, b = self._rng.randint(0, 10), self._rng.randint(0, 10)
        if self._rng.coin():
            return _arithmetic(a, OpType.ADDITION, b, a + b)
        if a < b:
            a, b = b, a
        return _arithmetic(a, OpType.SUBTRACTION, b, a - b)

    def _third_grade(self) -> tuple[str, int, OpType]:
        a, b = self._rng.randint(0, 20), self._rng.randint(0, 20)
        op = _THIRD_GRADE_OPS[self._rng.randint(0, len(_THIRD_GRADE_OPS) - 1)]
        if op is OpType.ADDITION:
            return _arithmetic(a, op, b, a + b)
        if op is OpType.SUBTRACTION:
            return _arithmetic(a, op, b, a - b)
        # Single-digit multiplication only.
        a, b = self._rng.randint(0, 9), self._rng.randint(0, 9)
        return _arithmetic(a, op, b, a * b)

    def _fifth_grade(self) -> tuple[str, int, OpType]:
        op = _FIFTH_GRADE_OPS[self._rng.randint(0, len(_FIFTH_GRADE_OPS) - 1)]
        if op is OpType.ADDITION:
            a, b = self._rng.randint(10, 99), self._rng.randint(10, 99)
            return _arithmetic(a, op, b, a + b)
        if op is OpType.SUBTRACTION:
            a, b = self._rng.randint(10, 99), self._rng.randint(10, 99)
            return _arithmetic(a, op, b, a - b)
        if op is OpType.MULTIPLICATION:
            a, b = self._rng.randint(1, 15), self._rng.randint(1, 15)
            return _arithmetic(a, op, b, a * b)
        divisor = self._rng.randint(1, 15)
        quotient = self._rng.randint(1, 20)
        return _arithmetic(divisor * quotient, op, divisor, quotient)

    def _algebra(self) -> tuple[str, int, OpType]:
        template = self._rng.randint(0, ALGEBRA_TEMPLATE_COUNT - 1)

        if template == 5:
            n = self._rng.randint(1, 5)
            m = self._rng.randint(-10, 10)
            if m == 0:
                m = 1
            return _algebra(f"x ÷ {n} = {m}", n * m, OpType.ALGEBRA_DIVISION)

        x = self._rng.randint(-20, 20)
        if template == 0:
            n = self._rng.randint(1, 10)
            return _algebra(f"x + {n} = {x + n}", x, OpType.ALGEBRA_ADDITION)
        if template == 1:
            n = self._rng.randint(1, 5)
            return _algebra(f"x - {n} = {x - n}", x, OpType.ALGEBRA_SUBTRACTION)
        if template == 2:
            n = self._rng.randint(1, 10)
            return _algebra(f"{n} + x = {x + n}", x, OpType.ALGEBRA_ADDITION)
        if template == 3:
            n = x + self._rng.randint(0, 9)
            return _algebra(f"{n} - x = {n - x}", x, OpType.ALGEBRA_SUBTRACTION)
        n = self._rng.randint(1, 6)
        if template == 4:
            return _algebra(f"x * {n} = {x * n}", x, OpType.ALGEBRA_MULTIPLICATION)
        return _algebra(f"{n} * x = {x * n}", x, OpType.ALGEBRA_MULTIPLICATION)

    def _fallback(self) -> tuple[str, int, OpType]:
        a, b = self._rng.randint(0, 10), self._rng.randint(0, 10)
        return _arithmetic(a, OpType.ADDITION, b, a + b)

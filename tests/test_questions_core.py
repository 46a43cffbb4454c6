from __future__ import annotations

import re

import pytest

from mathbomb.questions import QuestionGenerator
from mathbomb.quiz_core import Difficulty, OpType, SeededRng

ARITH_RE = re.compile(r"^(-?\d+) ([+\-*/]) (-?\d+) = \?$")


def _parse_arith(text: str) -> tuple[int, str, int]:
    m = ARITH_RE.match(text)
    assert m is not None, text
    return int(m.group(1)), m.group(2), int(m.group(3))


def _solve_algebra(text: str) -> int:
    """Independently solve the generated one-step equation for x."""
    assert text.endswith(". What is x?"), text
    eq = text[: -len(". What is x?")]
    lhs, rhs = eq.split(" = ")
    m = int(rhs)
    a, op, b = lhs.split(" ")
    if a == "x":
        n = int(b)
        if op == "+":
            return m - n
        if op == "-":
            return m + n
        if op == "*":
            assert m % n == 0
            return m // n
        assert op == "÷"
        return m * n
    n = int(a)
    assert b == "x"
    if op == "+":
        return m - n
    if op == "-":
        return n - m
    assert op == "*"
    assert m % n == 0
    return m // n


def test_generator_determinism_same_seed_same_sequence() -> None:
    for difficulty in Difficulty:
        g1 = QuestionGenerator(SeededRng(123))
        g2 = QuestionGenerator(SeededRng(123))
        used1: set[str] = set()
        used2: set[str] = set()
        seq1 = [g1.generate(difficulty, used1) for _ in range(40)]
        seq2 = [g2.generate(difficulty, used2) for _ in range(40)]
        assert seq1 == seq2


@pytest.mark.parametrize("difficulty", [d.value for d in Difficulty] + ["Kindergarten"])
def test_generated_id_is_new_before_and_registered_after(difficulty: str) -> None:
    gen = QuestionGenerator(SeededRng(5))
    used: set[str] = set()
    for _ in range(200):
        before = set(used)
        q = gen.generate(difficulty, used)
        assert q.id not in before
        assert q.id in used
        assert q.id.startswith(f"{difficulty}|")
    assert len(used) == 200


class _CollidingRng(SeededRng):
    def __init__(self, tokens: list[int]) -> None:
        super().__init__(1)
        self._tokens = tokens

    def token(self) -> int:
        return self._tokens.pop(0)


def test_id_collision_is_retried_until_unused() -> None:
    rng = _CollidingRng([7, 7, 8])
    gen = QuestionGenerator(rng)
    used = {"1st Grade|7"}

    q = gen.generate(Difficulty.FIRST_GRADE, used)

    assert q.id == "1st Grade|8"
    assert used == {"1st Grade|7", "1st Grade|8"}
    assert rng._tokens == []


def test_same_text_may_repeat_under_a_new_id() -> None:
    gen = QuestionGenerator(SeededRng(3))
    used: set[str] = set()
    qs = [gen.generate(Difficulty.FIRST_GRADE, used) for _ in range(500)]
    texts = [q.text for q in qs]
    # 1st grade has far fewer than 500 distinct problems.
    assert len(set(texts)) < len(texts)
    assert len({q.id for q in qs}) == len(qs)


def test_first_grade_ranges_and_non_negative_subtraction() -> None:
    gen = QuestionGenerator(SeededRng(11))
    used: set[str] = set()
    seen_ops = set()
    for _ in range(1000):
        q = gen.generate(Difficulty.FIRST_GRADE, used)
        a, op, b = _parse_arith(q.text)
        assert 0 <= a <= 10 and 0 <= b <= 10
        seen_ops.add(q.op_type)
        if op == "+":
            assert q.op_type is OpType.ADDITION
            assert q.answer == a + b
        else:
            assert op == "-"
            assert q.op_type is OpType.SUBTRACTION
            assert q.answer == a - b
            assert q.answer >= 0
    assert seen_ops == {OpType.ADDITION, OpType.SUBTRACTION}


def test_third_grade_ranges() -> None:
    gen = QuestionGenerator(SeededRng(12))
    used: set[str] = set()
    seen_ops = set()
    for _ in range(1000):
        q = gen.generate(Difficulty.THIRD_GRADE, used)
        a, op, b = _parse_arith(q.text)
        seen_ops.add(op)
        if op == "*":
            assert 0 <= a <= 9 and 0 <= b <= 9
            assert q.answer == a * b
            assert q.op_type is OpType.MULTIPLICATION
        else:
            assert 0 <= a <= 20 and 0 <= b <= 20
            assert q.answer == (a + b if op == "+" else a - b)
    assert seen_ops == {"+", "-", "*"}


def test_fifth_grade_ranges_and_exact_division() -> None:
    gen = QuestionGenerator(SeededRng(13))
    used: set[str] = set()
    seen_ops = set()
    for _ in range(2000):
        q = gen.generate(Difficulty.FIFTH_GRADE, used)
        a, op, b = _parse_arith(q.text)
        seen_ops.add(q.op_type)
        if op in "+-":
            assert 10 <= a <= 99 and 10 <= b <= 99
            assert q.answer == (a + b if op == "+" else a - b)
        elif op == "*":
            assert 1 <= a <= 15 and 1 <= b <= 15
            assert q.answer == a * b
        else:
            assert q.op_type is OpType.DIVISION
            assert 1 <= b <= 15
            assert a % b == 0
            assert a // b == q.answer
            assert 1 <= q.answer <= 20
    assert seen_ops == {OpType.ADDITION, OpType.SUBTRACTION, OpType.MULTIPLICATION, OpType.DIVISION}


def test_algebra_templates_are_consistent() -> None:
    gen = QuestionGenerator(SeededRng(14))
    used: set[str] = set()
    seen_ops = set()
    for _ in range(3000):
        q = gen.generate(Difficulty.ALGEBRA, used)
        assert q.op_type.is_algebra
        seen_ops.add(q.op_type)
        assert _solve_algebra(q.text) == q.answer
        if q.op_type is OpType.ALGEBRA_DIVISION:
            n = int(q.text.split(" ")[2])
            m = int(q.text.split(" = ")[1].split(".")[0])
            assert 1 <= n <= 5
            assert m != 0 and -10 <= m <= 10
            assert q.answer == n * m
        else:
            assert -20 <= q.answer <= 20
    assert seen_ops == {
        OpType.ALGEBRA_ADDITION,
        OpType.ALGEBRA_SUBTRACTION,
        OpType.ALGEBRA_MULTIPLICATION,
        OpType.ALGEBRA_DIVISION,
    }


def test_unknown_difficulty_falls_back_to_small_addition() -> None:
    gen = QuestionGenerator(SeededRng(15))
    used: set[str] = set()
    for _ in range(200):
        q = gen.generate("Kindergarten", used)
        a, op, b = _parse_arith(q.text)
        assert op == "+"
        assert q.op_type is OpType.ADDITION
        assert 0 <= a <= 10 and 0 <= b <= 10
        assert q.answer == a + b

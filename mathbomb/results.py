from __future__ import annotations

from dataclasses import dataclass

from .quiz_core import AnswerRecord, OpType

TIMES_UP_BANNER = "\n\n💣💥 BOOM! TIME’S UP! 💥💣\n\n"
PLAY_AGAIN_HINT = "[←] to play again"

ARITHMETIC_GROUP = "Arithmetic"
ALGEBRA_GROUP = "Algebra"


@dataclass(frozen=True, slots=True)
class OpTypeStat:
    op_type: OpType
    count: int
    mean_elapsed_s: float


@dataclass(frozen=True, slots=True)
class OpTypeGroup:
    name: str
    stats: tuple[OpTypeStat, ...]


@dataclass(frozen=True, slots=True)
class MissedQuestion:
    position: int  # 1-based index in the answer history
    text: str
    raw_input: str
    correct_answer: int


@dataclass(frozen=True, slots=True)
class ResultsSummary:
    """Summary of one finished episode.

    Groups come in a fixed order (Arithmetic, then Algebra) and empty groups
    are left out. Within a group, operation types keep first-answered order.
    """

    total: int
    correct: int
    mean_elapsed_s: float | None
    groups: tuple[OpTypeGroup, ...]
    missed: tuple[MissedQuestion, ...]
    timed_out: bool


def summarize(answers: list[AnswerRecord] | tuple[AnswerRecord, ...], *, timed_out: bool) -> ResultsSummary:
    total = len(answers)
    correct = sum(1 for a in answers if a.correct)
    mean_elapsed = None if total == 0 else sum(a.elapsed_s for a in answers) / total

    by_op: dict[OpType, list[float]] = {}
    missed: list[MissedQuestion] = []
    for i, a in enumerate(answers):
        by_op.setdefault(a.question.op_type, []).append(a.elapsed_s)
        if not a.correct:
            missed.append(
                MissedQuestion(
                    position=i + 1,
                    text=a.question.text,
                    raw_input=a.raw_input,
                    correct_answer=a.question.answer,
                )
            )

    stats = [
        OpTypeStat(op_type=op, count=len(times), mean_elapsed_s=sum(times) / len(times))
        for op, times in by_op.items()
    ]
    groups: list[OpTypeGroup] = []
    for name, want_algebra in ((ARITHMETIC_GROUP, False), (ALGEBRA_GROUP, True)):
        members = tuple(s for s in stats if s.op_type.is_algebra is want_algebra)
        if members:
            groups.append(OpTypeGroup(name=name, stats=members))

    return ResultsSummary(
        total=total,
        correct=correct,
        mean_elapsed_s=mean_elapsed,
        groups=tuple(groups),
        missed=tuple(missed),
        timed_out=timed_out,
    )


def format_results(summary: ResultsSummary) -> str:
    """Plain text of the results view."""

    lines = [f"Final Score: {summary.correct} / {summary.total}"]
    if summary.mean_elapsed_s is not None:
        lines.append(f"Avg time (overall): {summary.mean_elapsed_s:.2f}s")

    for group in summary.groups:
        lines.append("")
        lines.append(f"{group.name}:")
        for stat in group.stats:
            lines.append(f"  Avg time ({stat.op_type.label}): {stat.mean_elapsed_s:.2f}s")

    if summary.missed:
        lines.append("")
        lines.append("Incorrect Answers:")
        for m in summary.missed:
            lines.append(f"  Question #{m.position}: {m.text}")
            lines.append(f"    Your Answer: {m.raw_input}")
            lines.append(f"    Correct Answer: {m.correct_answer}")

    lines.append("")
    lines.append(PLAY_AGAIN_HINT)

    text = "\n".join(lines)
    if summary.timed_out:
        text = TIMES_UP_BANNER + text
    return text

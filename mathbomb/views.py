"""Per-phase views.

Each event redraws the whole frame: the clear-screen sequence followed by the
view of the current phase, laid out by a ``rich`` console.
"""

from __future__ import annotations

from rich.console import Console, RenderableType
from rich.padding import Padding
from rich.text import Text

from .quiz_core import Polarity, SessionPhase
from .results import format_results
from .session import QuizSession

CLEAR_SCREEN = "\x1b[H\x1b[2J"

MENU_FOOTER = "Fullscreen recommended"
TIME_SELECT_FOOTER = (
    "Correct answers add 1s to time, incorrect subtracts 1s.\n"
    "Try to keep the bomb from exploding!\n"
    "[←] to go back | [q] to quit"
)
RUNNING_FOOTER = "[q] to quit"

FLASH_COLORS: dict[Polarity, str] = {
    Polarity.CORRECT: "color(10)",
    Polarity.INCORRECT: "color(9)",
}


def make_console(*, width: int = 80) -> Console:
    return Console(
        force_terminal=True,
        color_system="256",
        width=width,
        highlight=False,
        emoji=False,
    )


def render_menu(session: QuizSession) -> RenderableType:
    out = session.difficulty_list.render()
    out.append(f"\n{MENU_FOOTER}")
    return out


def render_time_select(session: QuizSession) -> RenderableType:
    out = session.duration_list.render()
    out.append(f"\n{TIME_SELECT_FOOTER}")
    return out


def render_running(session: QuizSession) -> RenderableType:
    question = session.current_question
    out = Text(f"Time Left: {session.budget.remaining_s}s\n")
    out.append_text(session.countdown_bar())
    out.append(f"\nCorrect: {session.correct_count}/{len(session.answers)}\n\n")
    out.append("" if question is None else question.text)
    out.append("\n\n")
    out.append_text(session.text_input.render())
    out.append(f"\n{RUNNING_FOOTER}\n")
    flash = session.flash
    if flash.active:
        out.append("\n\n")
        out.append(flash.text, style=f"bold {FLASH_COLORS[flash.polarity]}")
    return Padding(out, (1, 2))


def render_results(session: QuizSession) -> RenderableType:
    return Padding(Text(format_results(session.summary())), (1, 2))


def render_view(session: QuizSession) -> RenderableType:
    phase = session.phase
    if phase is SessionPhase.MENU:
        return render_menu(session)
    if phase is SessionPhase.TIME_SELECT:
        return render_time_select(session)
    if phase is SessionPhase.RUNNING:
        return render_running(session)
    if phase is SessionPhase.RESULTS:
        return render_results(session)
    return Text("Unknown state")


def render_frame(session: QuizSession, console: Console) -> str:
    with console.capture() as capture:
        console.print(render_view(session))
    return CLEAR_SCREEN + capture.get()

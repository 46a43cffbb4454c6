"""Session state machine for the bomb quiz.

MENU -> TIME_SELECT -> RUNNING -> RESULTS -> MENU

``QuizSession.handle`` is the single reducer: it takes one event (a key press
or a timer fire), mutates the session state it owns and returns ``Effects``
telling the event loop which timers to arm, whether to ring the bell and
whether to quit. Events are handled strictly one at a time; the flash, fade
and tick interactions rely on that ordering.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Callable

from rich.text import Text

from .countdown_bar import render_countdown_bar
from .questions import QuestionGenerator
from .quiz_core import (
    DURATION_CHOICES,
    AnswerRecord,
    ColorOverride,
    Difficulty,
    FlashState,
    Question,
    SeededRng,
    SessionPhase,
    TimeBudget,
)
from .results import ResultsSummary, summarize
from .scoring import FLASH_FADE_STEPS, score_answer
from .timers import (
    ANIMATION_TIMERS,
    Clock,
    ScheduledTimer,
    TimerFired,
    TimerKind,
    next_fade_step,
    next_fuse_frame,
    next_pulse_override,
    next_remaining,
    schedule,
)
from .widgets import Key, KeyPress, ListItem, SelectList, TextInput

logger = logging.getLogger(__name__)

Event = KeyPress | TimerFired

DIFFICULTY_TITLE = "Select Difficulty Level"
DURATION_TITLE = "Select Quiz Duration"
ANSWER_PLACEHOLDER = "Your answer"


@dataclass(frozen=True, slots=True)
class QuizConfig:
    bar_width: int = 30
    answer_char_limit: int = 5
    answer_width: int = 20
    pulse_threshold_s: int = 10
    flash_fade_steps: int = FLASH_FADE_STEPS
    fuse_glyphs: tuple[str, ...] = ("*", "✨", "·", "✶")


@dataclass(frozen=True, slots=True)
class Effects:
    timers: tuple[ScheduledTimer, ...] = ()
    bell: bool = False
    quit: bool = False


class QuizSession:
    """Owns all mutable state of one program run.

    Time is read only through the injected clock (for answer timing);
    the passage of session time arrives as TICK events.
    """

    def __init__(
        self,
        *,
        clock: Clock,
        generator: QuestionGenerator,
        config: QuizConfig | None = None,
    ) -> None:
        cfg = config or QuizConfig()
        if cfg.bar_width <= 0:
            raise ValueError("bar_width must be > 0")
        if not cfg.fuse_glyphs:
            raise ValueError("fuse_glyphs must not be empty")
        if cfg.flash_fade_steps < 1:
            raise ValueError("flash_fade_steps must be >= 1")

        self._clock = clock
        self._generator = generator
        self._config = cfg

        self._phase: SessionPhase = SessionPhase.MENU
        self._difficulty: str = Difficulty.FIRST_GRADE.value
        self._budget = TimeBudget(limit_s=0, remaining_s=0)
        self._answers: list[AnswerRecord] = []
        self._used_ids: set[str] = set()
        self._current: Question | None = None
        self._presented_at_s: float | None = None

        self._flash = FlashState()
        self._suspend_tick = False
        self._fuse_frame = 0

        # Tokens that let stale timers from an earlier episode or answer fall through.
        self._episode = 0
        self._answer_serial = 0
        self._armed_animations: set[TimerKind] = set()

        self._difficulty_list = SelectList(
            DIFFICULTY_TITLE, [ListItem(d.value, d.description) for d in Difficulty]
        )
        self._duration_list = SelectList(
            DURATION_TITLE, [ListItem(c.label, c.description) for c in DURATION_CHOICES]
        )
        self._input = TextInput(
            placeholder=ANSWER_PLACEHOLDER,
            char_limit=cfg.answer_char_limit,
            width=cfg.answer_width,
        )
        self._input.focus()

        self._key_handlers: dict[SessionPhase, Callable[[KeyPress], Effects]] = {
            SessionPhase.MENU: self._on_menu_key,
            SessionPhase.TIME_SELECT: self._on_time_select_key,
            SessionPhase.RUNNING: self._on_running_key,
            SessionPhase.RESULTS: self._on_results_key,
        }

    @property
    def config(self) -> QuizConfig:
        return self._config

    @property
    def phase(self) -> SessionPhase:
        return self._phase

    @property
    def difficulty(self) -> str:
        return self._difficulty

    @property
    def budget(self) -> TimeBudget:
        return self._budget

    @property
    def answers(self) -> tuple[AnswerRecord, ...]:
        return tuple(self._answers)

    @property
    def used_ids(self) -> frozenset[str]:
        return frozenset(self._used_ids)

    @property
    def current_question(self) -> Question | None:
        return self._current

    @property
    def flash(self) -> FlashState:
        return self._flash

    @property
    def suspend_tick(self) -> bool:
        return self._suspend_tick

    @property
    def fuse_frame_index(self) -> int:
        return self._fuse_frame

    @property
    def fuse_glyph(self) -> str:
        return self._config.fuse_glyphs[self._fuse_frame]

    @property
    def difficulty_list(self) -> SelectList:
        return self._difficulty_list

    @property
    def duration_list(self) -> SelectList:
        return self._duration_list

    @property
    def text_input(self) -> TextInput:
        return self._input

    @property
    def correct_count(self) -> int:
        return sum(1 for a in self._answers if a.correct)

    def start(self) -> Effects:
        """Arm the animation clocks; call once before feeding events."""
        return Effects(timers=self._arm_animations())

    def handle(self, event: Event) -> Effects:
        handler = self._key_handlers.get(self._phase)
        if handler is None:
            logger.warning("unknown session phase %r; returning to menu", self._phase)
            self._reset_to_menu()
            return Effects()

        if isinstance(event, TimerFired):
            return self._on_timer(event)
        if event.key is Key.CTRL_C:
            return Effects(quit=True)
        return handler(event)

    def countdown_bar(self) -> Text:
        return render_countdown_bar(
            self._budget.remaining_s,
            self._budget.limit_s,
            self._config.bar_width,
            self._flash.bar_adjust,
            self._flash.color_override,
            self.fuse_glyph,
        )

    def summary(self) -> ResultsSummary:
        return summarize(self._answers, timed_out=self._budget.expired)

    # Keys

    def _on_menu_key(self, press: KeyPress) -> Effects:
        if press.is_char("q"):
            return Effects(quit=True)
        if press.key is Key.ENTER:
            self._difficulty = self._difficulty_list.selected().label
            self._phase = SessionPhase.TIME_SELECT
            logger.debug("difficulty selected: %s", self._difficulty)
            return Effects()
        self._difficulty_list.handle_key(press)
        return Effects()

    def _on_time_select_key(self, press: KeyPress) -> Effects:
        if press.is_char("q"):
            return Effects(quit=True)
        if press.key is Key.LEFT:
            self._phase = SessionPhase.MENU
            return Effects()
        if press.key is Key.ENTER:
            label = self._duration_list.selected().label
            seconds = next(c.seconds for c in DURATION_CHOICES if c.label == label)
            return self._start_episode(seconds)
        self._duration_list.handle_key(press)
        return Effects()

    def _on_running_key(self, press: KeyPress) -> Effects:
        if press.is_char("q") or press.key is Key.LEFT:
            logger.info("episode abandoned after %d answers", len(self._answers))
            self._reset_to_menu()
            return Effects()
        if press.key is Key.ENTER:
            return self._submit()
        self._input.handle_key(press)
        return Effects()

    def _on_results_key(self, press: KeyPress) -> Effects:
        if press.key is Key.LEFT:
            self._reset_to_menu()
        return Effects()

    def _start_episode(self, limit_s: int) -> Effects:
        self._episode += 1
        self._budget = TimeBudget(limit_s=limit_s, remaining_s=limit_s)
        self._used_ids = set()
        self._answers = []
        self._flash = FlashState()
        self._suspend_tick = False
        self._input.reset()
        self._input.focus()
        self._phase = SessionPhase.RUNNING
        self._deal_question()
        logger.info("episode %d started: %s, %ds", self._episode, self._difficulty, limit_s)
        return Effects(timers=(schedule(TimerKind.TICK, token=self._episode),) + self._arm_animations())

    def _submit(self) -> Effects:
        if self._flash.active or self._current is None:
            return Effects()
        assert self._presented_at_s is not None

        outcome = score_answer(
            question=self._current,
            raw=self._input.value,
            elapsed_s=self._clock.now() - self._presented_at_s,
            budget=self._budget,
            fade_steps=self._config.flash_fade_steps,
        )
        if outcome is None:
            return Effects()

        self._answers.append(outcome.record)
        self._budget = outcome.budget
        self._flash = outcome.flash
        self._suspend_tick = True
        self._input.blur()
        self._answer_serial += 1
        return Effects(
            timers=(
                schedule(TimerKind.FLASH_DONE, token=self._answer_serial),
                schedule(TimerKind.FLASH_FADE, token=self._answer_serial),
            )
        )

    # Timers

    def _on_timer(self, fired: TimerFired) -> Effects:
        if fired.kind is TimerKind.TICK:
            return self._on_tick(fired.token)
        if fired.kind is TimerKind.FUSE:
            self._fuse_frame = next_fuse_frame(self._fuse_frame, len(self._config.fuse_glyphs))
            return Effects(timers=(schedule(TimerKind.FUSE),))
        if fired.kind is TimerKind.PULSE:
            if self._phase is SessionPhase.RUNNING:
                override = next_pulse_override(
                    self._budget.remaining_s,
                    self._flash.color_override,
                    threshold_s=self._config.pulse_threshold_s,
                )
                self._flash = replace(self._flash, color_override=override)
            return Effects(timers=(schedule(TimerKind.PULSE),))
        if fired.kind is TimerKind.FLASH_DONE:
            return self._on_flash_done(fired.token)
        return self._on_flash_fade(fired.token)

    def _on_tick(self, token: int) -> Effects:
        if self._phase is not SessionPhase.RUNNING or token != self._episode:
            return Effects()

        remaining = next_remaining(self._budget.remaining_s, suspended=self._suspend_tick)
        self._budget = replace(self._budget, remaining_s=remaining)
        if remaining <= 0:
            self._phase = SessionPhase.RESULTS
            self._input.blur()
            logger.info(
                "episode %d timed out: %d/%d correct", self._episode, self.correct_count, len(self._answers)
            )
            return Effects(bell=True)
        return Effects(timers=(schedule(TimerKind.TICK, token=token),))

    def _on_flash_done(self, token: int) -> Effects:
        if not self._flash_is_current(token):
            return Effects()
        self._flash = FlashState()
        self._input.reset()
        self._input.focus()
        self._deal_question()
        self._suspend_tick = False
        return Effects()

    def _on_flash_fade(self, token: int) -> Effects:
        if not self._flash_is_current(token) or self._flash.fade_steps_left <= 0:
            return Effects()
        steps, keep_fading = next_fade_step(self._flash.fade_steps_left)
        override = self._flash.color_override if steps > 0 else ColorOverride.NONE
        self._flash = replace(self._flash, fade_steps_left=steps, color_override=override)
        if keep_fading:
            return Effects(timers=(schedule(TimerKind.FLASH_FADE, token=token),))
        return Effects()

    def _flash_is_current(self, token: int) -> bool:
        return (
            self._phase is SessionPhase.RUNNING
            and self._flash.active
            and token == self._answer_serial
        )

    def _arm_animations(self) -> tuple[ScheduledTimer, ...]:
        timers = tuple(schedule(kind) for kind in ANIMATION_TIMERS if kind not in self._armed_animations)
        self._armed_animations.update(ANIMATION_TIMERS)
        return timers

    def _deal_question(self) -> None:
        self._current = self._generator.generate(self._difficulty, self._used_ids)
        self._presented_at_s = self._clock.now()

    def _reset_to_menu(self) -> None:
        self._phase = SessionPhase.MENU
        self._difficulty_list.select(0)
        self._duration_list.select(0)
        self._input.reset()
        self._input.focus()
        self._answers = []
        self._used_ids = set()
        self._current = None
        self._presented_at_s = None
        self._flash = FlashState()
        self._suspend_tick = False


def build_quiz_session(
    *,
    clock: Clock,
    seed: int,
    config: QuizConfig | None = None,
) -> QuizSession:
    """Factory for a quiz session with a seeded question stream."""

    return QuizSession(
        clock=clock,
        generator=QuestionGenerator(SeededRng(seed)),
        config=config,
    )

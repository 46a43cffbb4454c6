"""Terminal shell for the bomb quiz.

Deterministic timing/scoring/RNG/state lives in the core modules; this module
only drains key presses and due timers into the session one at a time and
redraws after every event.
"""

from __future__ import annotations

import logging
import random
import sys
from collections.abc import Callable

from .session import Effects, QuizConfig, QuizSession, build_quiz_session
from .terminal import BELL, AnsiTerminal, Terminal, TerminalUnavailableError
from .timers import Clock, RealClock, TimerQueue
from .views import make_console, render_frame

logger = logging.getLogger(__name__)


def _new_seed() -> int:
    return random.SystemRandom().randint(1, 2**31 - 1)


class App:
    def __init__(self, *, session: QuizSession, terminal: Terminal, clock: Clock) -> None:
        self._session = session
        self._terminal = terminal
        self._timers = TimerQueue(clock)
        self._console = make_console(width=terminal.width())
        self._running = True

    @property
    def running(self) -> bool:
        return self._running

    @property
    def session(self) -> QuizSession:
        return self._session

    def start(self) -> None:
        self._apply(self._session.start())
        self.render()

    def step(self) -> bool:
        """Wait for and dispatch one event. Returns False if nothing happened."""

        key = self._terminal.read_key(self._timers.time_until_next())
        if key is not None:
            effects = self._session.handle(key)
        else:
            fired = self._timers.pop_due()
            if fired is None:
                return False
            effects = self._session.handle(fired)
        self._apply(effects)
        self.render()
        return True

    def render(self) -> None:
        self._terminal.write(render_frame(self._session, self._console))

    def _apply(self, effects: Effects) -> None:
        for timer in effects.timers:
            self._timers.arm(timer)
        if effects.bell:
            self._terminal.write(BELL)
        if effects.quit:
            self._running = False


def run(
    *,
    seed: int | None = None,
    config: QuizConfig | None = None,
    clock: Clock | None = None,
    terminal_factory: Callable[[], Terminal] | None = None,
    max_events: int | None = None,
) -> int:
    clock = clock or RealClock()
    seed = _new_seed() if seed is None else int(seed)
    session = build_quiz_session(clock=clock, seed=seed, config=config)
    logger.debug("starting with seed %d", seed)

    try:
        terminal = (terminal_factory or AnsiTerminal.open)()
        with terminal:
            app = App(session=session, terminal=terminal, clock=clock)
            app.start()
            events = 0
            while app.running:
                if app.step():
                    events += 1
                if max_events is not None and events >= max_events:
                    break
    except TerminalUnavailableError as exc:
        logger.error("cannot start: %s", exc)
        print(f"error: {exc}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        pass

    return 0

"""POSIX terminal I/O: cbreak-mode keystrokes in, full frames out."""

from __future__ import annotations

import os
import select
import shutil
import sys
from collections import deque
from typing import Protocol, TextIO

from .widgets import Key, KeyPress

HIDE_CURSOR = "\x1b[?25l"
SHOW_CURSOR = "\x1b[?25h"
BELL = "\a"

_ARROWS: dict[str, Key] = {"A": Key.UP, "B": Key.DOWN, "C": Key.RIGHT, "D": Key.LEFT}


class TerminalUnavailableError(RuntimeError):
    """Raised when stdin/stdout is not an interactive POSIX terminal."""


class Terminal(Protocol):
    def __enter__(self) -> "Terminal": ...
    def __exit__(self, *exc: object) -> None: ...
    def read_key(self, timeout: float | None) -> KeyPress | None: ...
    def write(self, text: str) -> None: ...
    def width(self) -> int: ...


def decode_keys(data: str) -> list[KeyPress]:
    """Split a chunk read from the terminal into key presses.

    Unknown escape sequences and control characters are dropped.
    """

    keys: list[KeyPress] = []
    i = 0
    while i < len(data):
        ch = data[i]
        if ch == "\x1b":
            if i + 2 < len(data) and data[i + 1] in "[O" and data[i + 2] in _ARROWS:
                keys.append(KeyPress(_ARROWS[data[i + 2]]))
                i += 3
                continue
            # Skip the rest of an unrecognised CSI sequence.
            i += 1
            if i < len(data) and data[i] in "[O":
                i += 1
                while i < len(data) and not data[i].isalpha() and data[i] != "~":
                    i += 1
                i += 1
            continue
        if ch in ("\r", "\n"):
            keys.append(KeyPress(Key.ENTER))
        elif ch in ("\x7f", "\x08"):
            keys.append(KeyPress(Key.BACKSPACE))
        elif ch == "\x03":
            keys.append(KeyPress(Key.CTRL_C))
        elif ch.isprintable():
            keys.append(KeyPress.of(ch))
        i += 1
    return keys


class AnsiTerminal:
    """The controlling terminal, switched to cbreak mode while entered."""

    def __init__(self, stdin: TextIO, stdout: TextIO) -> None:
        self._stdin = stdin
        self._stdout = stdout
        self._fd = stdin.fileno()
        self._saved_attrs: list | None = None
        self._pending: deque[KeyPress] = deque()

    @classmethod
    def open(cls) -> "AnsiTerminal":
        if not (sys.stdin.isatty() and sys.stdout.isatty()):
            raise TerminalUnavailableError("stdin and stdout must be a terminal")
        return cls(sys.stdin, sys.stdout)

    def __enter__(self) -> "AnsiTerminal":
        try:
            import termios
            import tty
        except ImportError as exc:
            raise TerminalUnavailableError("termios is not available on this platform") from exc

        try:
            self._saved_attrs = termios.tcgetattr(self._fd)
            tty.setcbreak(self._fd)
        except termios.error as exc:
            raise TerminalUnavailableError(f"cannot configure terminal: {exc}") from exc
        self.write(HIDE_CURSOR)
        return self

    def __exit__(self, *exc: object) -> None:
        import termios

        self.write(SHOW_CURSOR)
        if self._saved_attrs is not None:
            termios.tcsetattr(self._fd, termios.TCSADRAIN, self._saved_attrs)
            self._saved_attrs = None

    def read_key(self, timeout: float | None) -> KeyPress | None:
        if not self._pending:
            ready, _, _ = select.select([self._fd], [], [], timeout)
            if not ready:
                return None
            chunk = os.read(self._fd, 64)
            if not chunk:
                raise TerminalUnavailableError("terminal input closed")
            data = chunk.decode("utf-8", errors="ignore")
            self._pending.extend(decode_keys(data))
        return self._pending.popleft() if self._pending else None

    def write(self, text: str) -> None:
        self._stdout.write(text)
        self._stdout.flush()

    def width(self) -> int:
        return shutil.get_terminal_size().columns

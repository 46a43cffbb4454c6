"""Keyboard-driven collaborators: a selection list and a one-line text input."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from rich.text import Text


class Key(str, Enum):
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    ENTER = "enter"
    BACKSPACE = "backspace"
    CTRL_C = "ctrl_c"
    CHAR = "char"


@dataclass(frozen=True, slots=True)
class KeyPress:
    key: Key
    char: str = ""

    @classmethod
    def of(cls, char: str) -> "KeyPress":
        return cls(Key.CHAR, char)

    def is_char(self, char: str) -> bool:
        return self.key is Key.CHAR and self.char == char


@dataclass(frozen=True, slots=True)
class ListItem:
    label: str
    description: str


class SelectList:
    def __init__(self, title: str, items: list[ListItem]) -> None:
        if not items:
            raise ValueError("items must not be empty")
        self._title = title
        self._items = list(items)
        self._selected = 0

    @property
    def title(self) -> str:
        return self._title

    @property
    def items(self) -> list[ListItem]:
        return list(self._items)

    @property
    def index(self) -> int:
        return self._selected

    def selected(self) -> ListItem:
        return self._items[self._selected]

    def select(self, index: int) -> None:
        self._selected = max(0, min(len(self._items) - 1, index))

    def handle_key(self, press: KeyPress) -> None:
        if press.key is Key.UP or press.is_char("k"):
            self._move(-1)
        elif press.key is Key.DOWN or press.is_char("j"):
            self._move(1)

    def _move(self, delta: int) -> None:
        # Clamped like a terminal list, no wrap-around.
        self.select(self._selected + delta)

    def render(self) -> Text:
        out = Text(self._title, style="bold")
        out.append("\n")
        for idx, item in enumerate(self._items):
            out.append("\n")
            if idx == self._selected:
                out.append(f"│ {item.label}\n", style="bold color(170)")
                out.append(f"│ {item.description}\n", style="color(170)")
            else:
                out.append(f"  {item.label}\n")
                out.append(f"  {item.description}\n", style="dim")
        return out


class TextInput:
    def __init__(self, *, placeholder: str = "", char_limit: int = 0, width: int = 20) -> None:
        if char_limit < 0:
            raise ValueError("char_limit must be >= 0")
        self._placeholder = placeholder
        self._char_limit = char_limit  # 0 means unlimited
        self._width = width
        self._value = ""
        self._focused = False

    @property
    def value(self) -> str:
        return self._value

    @property
    def focused(self) -> bool:
        return self._focused

    def focus(self) -> None:
        self._focused = True

    def blur(self) -> None:
        self._focused = False

    def reset(self) -> None:
        self._value = ""

    def handle_key(self, press: KeyPress) -> None:
        if not self._focused:
            return
        if press.key is Key.BACKSPACE:
            self._value = self._value[:-1]
        elif press.key is Key.CHAR and press.char.isprintable():
            if self._char_limit and len(self._value) + len(press.char) > self._char_limit:
                return
            self._value += press.char

    def render(self) -> Text:
        out = Text("> ")
        if not self._value:
            out.append(self._placeholder[: self._width], style="dim")
        else:
            out.append(self._value[-self._width :])
        if self._focused:
            out.append(" ", style="reverse")
        return out

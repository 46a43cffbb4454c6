"""The bomb-and-fuse countdown bar.

``render_countdown_bar`` is pure: the same arguments always give the same
styled text. Styling is carried by ``rich`` spans, so callers can take
``.plain`` for the glyphs or print the text for the colored version.
"""

from __future__ import annotations

import math

from rich.text import Text

from .quiz_core import ColorOverride

TIMES_UP = "💥 TIME'S UP! 💥"
BOMB = "💣"
BLOCK = "█"

CALM_COLOR = "color(10)"
WARNING_COLOR = "color(11)"
DANGER_COLOR = "color(88)"
FUSE_COLOR = "color(11)"

OVERRIDE_COLORS: dict[ColorOverride, str] = {
    ColorOverride.BRIGHT_POSITIVE: "color(82)",
    ColorOverride.BRIGHT_NEGATIVE: "color(196)",
}


def filled_columns(remaining_s: int, limit_s: int, width: int, adjust: int) -> int:
    percent = remaining_s / limit_s
    filled = math.floor(percent * width) + adjust
    return max(0, min(width, filled))


def bar_color(percent: float, override: ColorOverride) -> str:
    if override is not ColorOverride.NONE:
        return OVERRIDE_COLORS[override]
    if percent > 0.5:
        return CALM_COLOR
    if percent > 0.2:
        return WARNING_COLOR
    return DANGER_COLOR


def render_countdown_bar(
    remaining_s: int,
    limit_s: int,
    width: int,
    adjust: int,
    color_override: ColorOverride,
    fuse_glyph: str,
) -> Text:
    if remaining_s <= 0:
        return Text(TIMES_UP)
    if limit_s <= 0:
        raise ValueError("limit_s must be > 0")

    filled = filled_columns(remaining_s, limit_s, width, adjust)
    color = bar_color(remaining_s / limit_s, color_override)

    bar = Text(f"{BOMB}[")
    for i in range(width):
        if i == filled - 1:
            bar.append(fuse_glyph, style=FUSE_COLOR)
        elif i < filled:
            bar.append(BLOCK, style=color)
        else:
            bar.append(" ")
    bar.append("]")
    return bar

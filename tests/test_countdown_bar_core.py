from __future__ import annotations

import pytest

from mathbomb.countdown_bar import (
    BLOCK,
    CALM_COLOR,
    DANGER_COLOR,
    FUSE_COLOR,
    OVERRIDE_COLORS,
    TIMES_UP,
    WARNING_COLOR,
    bar_color,
    filled_columns,
    render_countdown_bar,
)
from mathbomb.quiz_core import ColorOverride


def _inner(plain: str) -> str:
    assert plain.startswith("💣[") and plain.endswith("]")
    return plain[2:-1]


@pytest.mark.parametrize("adjust", [-1, 0, 1])
@pytest.mark.parametrize("override", list(ColorOverride))
def test_times_up_token_when_no_time_left(adjust: int, override: ColorOverride) -> None:
    assert render_countdown_bar(0, 30, 30, adjust, override, "*").plain == TIMES_UP
    assert render_countdown_bar(-3, 60, 10, adjust, override, "✨").plain == TIMES_UP


def test_filled_stays_within_width_for_all_fractions() -> None:
    for width in (1, 7, 30):
        for limit in (30, 60, 90, 120):
            for remaining in range(0, limit + 1):
                for adjust in (-1, 0, 1):
                    filled = filled_columns(remaining, limit, width, adjust)
                    assert 0 <= filled <= width


def test_filled_rounds_down_then_adjusts() -> None:
    assert filled_columns(30, 30, 30, 0) == 30
    assert filled_columns(30, 30, 30, 1) == 30
    assert filled_columns(15, 30, 30, 0) == 15
    assert filled_columns(29, 60, 30, 0) == 14
    assert filled_columns(29, 60, 30, -1) == 13
    assert filled_columns(1, 120, 30, -1) == 0


def test_bar_layout_puts_fuse_on_leading_edge() -> None:
    text = render_countdown_bar(15, 30, 30, 0, ColorOverride.NONE, "*")
    inner = _inner(text.plain)
    assert len(inner) == 30
    assert inner == BLOCK * 14 + "*" + " " * 15


def test_adjust_nudges_the_leading_edge() -> None:
    plus = _inner(render_countdown_bar(15, 30, 30, 1, ColorOverride.BRIGHT_POSITIVE, "·").plain)
    minus = _inner(render_countdown_bar(15, 30, 30, -1, ColorOverride.BRIGHT_NEGATIVE, "·").plain)
    assert plus == BLOCK * 15 + "·" + " " * 14
    assert minus == BLOCK * 13 + "·" + " " * 16


def test_empty_bar_has_no_fuse() -> None:
    inner = _inner(render_countdown_bar(1, 120, 30, -1, ColorOverride.NONE, "*").plain)
    assert inner == " " * 30


def test_color_tiers_and_override() -> None:
    assert bar_color(0.9, ColorOverride.NONE) == CALM_COLOR
    assert bar_color(0.5, ColorOverride.NONE) == WARNING_COLOR
    assert bar_color(0.21, ColorOverride.NONE) == WARNING_COLOR
    assert bar_color(0.2, ColorOverride.NONE) == DANGER_COLOR
    assert bar_color(0.9, ColorOverride.BRIGHT_NEGATIVE) == OVERRIDE_COLORS[ColorOverride.BRIGHT_NEGATIVE]
    assert bar_color(0.1, ColorOverride.BRIGHT_POSITIVE) == OVERRIDE_COLORS[ColorOverride.BRIGHT_POSITIVE]


def test_blocks_and_fuse_carry_their_styles() -> None:
    text = render_countdown_bar(20, 30, 30, 0, ColorOverride.NONE, "*")
    styles = {str(span.style) for span in text.spans}
    assert styles == {CALM_COLOR, FUSE_COLOR}


def test_same_arguments_same_output() -> None:
    a = render_countdown_bar(7, 60, 30, -1, ColorOverride.BRIGHT_NEGATIVE, "✶")
    b = render_countdown_bar(7, 60, 30, -1, ColorOverride.BRIGHT_NEGATIVE, "✶")
    assert a.plain == b.plain
    assert a.spans == b.spans

"""Tests for palette, escape-sequence and RGB conversions."""
from __future__ import annotations

import pytest

from labellog.colors import (
    BASE_COLORS,
    AnsiColor,
    Color,
    RGBColor,
    palette_index_to_ansi_escape,
    palette_index_to_rgb,
    parse_ansi_escape,
    rgb_to_ansi_escape,
    rgb_to_nearest_palette_index,
)
from labellog.core.errors import (
    ColorError,
    InvalidColorCode,
    InvalidEscapeSequence,
    UnknownPaletteName,
    UnsupportedEscapeSequence,
)


def test_base_colors_cover_first_sixteen_indices() -> None:
    for index, expected in enumerate(BASE_COLORS):
        assert palette_index_to_rgb(index) == expected
    assert palette_index_to_rgb(9) == RGBColor(255, 0, 0)
    assert palette_index_to_rgb(7) == RGBColor(192, 192, 192)


@pytest.mark.parametrize(
    ("index", "expected"),
    [
        (16, RGBColor(0, 0, 0)),
        (21, RGBColor(0, 0, 255)),
        (196, RGBColor(255, 0, 0)),
        (110, RGBColor(102, 153, 204)),
        (231, RGBColor(255, 255, 255)),
    ],
)
def test_color_cube_indices(index: int, expected: RGBColor) -> None:
    assert palette_index_to_rgb(index) == expected


def test_grayscale_ramp() -> None:
    assert palette_index_to_rgb(232) == RGBColor(8, 8, 8)
    assert palette_index_to_rgb(244) == RGBColor(128, 128, 128)
    assert palette_index_to_rgb(255) == RGBColor(238, 238, 238)


@pytest.mark.parametrize("index", [-1, 256, 1000])
def test_out_of_range_index_is_rejected(index: int) -> None:
    with pytest.raises(InvalidColorCode):
        palette_index_to_rgb(index)


def test_rgb_channels_are_validated() -> None:
    with pytest.raises(InvalidColorCode):
        RGBColor(256, 0, 0)
    with pytest.raises(InvalidColorCode):
        RGBColor(0, -1, 0)


def test_every_palette_color_maps_back_to_its_first_index() -> None:
    first_index: dict[RGBColor, int] = {}
    for index in range(256):
        first_index.setdefault(palette_index_to_rgb(index), index)

    for index in range(256):
        color = palette_index_to_rgb(index)
        assert rgb_to_nearest_palette_index(color) == first_index[color]


def test_unique_palette_colors_are_exact_fixed_points() -> None:
    colors = [palette_index_to_rgb(i) for i in range(256)]
    unique = [i for i, color in enumerate(colors) if colors.count(color) == 1]

    assert unique
    for index in unique:
        assert rgb_to_nearest_palette_index(colors[index]) == index


def test_duplicate_colors_resolve_to_the_lowest_index() -> None:
    # 196 is the cube entry for pure red, which also sits at index 9.
    assert rgb_to_nearest_palette_index(palette_index_to_rgb(196)) == 9
    assert rgb_to_nearest_palette_index(RGBColor(0, 0, 0)) == 0


def test_nearest_color_is_deterministic() -> None:
    color = RGBColor(100, 149, 237)
    results = {rgb_to_nearest_palette_index(color) for _ in range(5)}
    assert len(results) == 1


def test_nearest_color_for_off_palette_value() -> None:
    assert rgb_to_nearest_palette_index(RGBColor(250, 5, 5)) == 9
    assert rgb_to_nearest_palette_index(RGBColor(9, 9, 9)) == 232


@pytest.mark.parametrize(
    ("sequence", "expected"),
    [
        ("\x1b[31m", AnsiColor(RGBColor(128, 0, 0), is_background=False)),
        ("\x1b[37m", AnsiColor(RGBColor(192, 192, 192), is_background=False)),
        ("\x1b[43m", AnsiColor(RGBColor(128, 128, 0), is_background=True)),
        ("\x1b[38;5;9m", AnsiColor(RGBColor(255, 0, 0), is_background=False)),
        ("\x1b[48;5;21m", AnsiColor(RGBColor(0, 0, 255), is_background=True)),
        ("\x1b[38;2;12;34;56m", AnsiColor(RGBColor(12, 34, 56), is_background=False)),
    ],
)
def test_parse_supported_sequences(sequence: str, expected: AnsiColor) -> None:
    assert parse_ansi_escape(sequence) == expected


@pytest.mark.parametrize("sequence", ["\x1b[99m", "\x1b[0m", "\x1b[1;31m", "\x1b[38;5m", "\x1b[38;9;1m"])
def test_unsupported_sequences(sequence: str) -> None:
    with pytest.raises(UnsupportedEscapeSequence):
        parse_ansi_escape(sequence)


@pytest.mark.parametrize("sequence", ["red", "", "\x1b[m", "\x1b[31", "[31m", "\x1b[3a1m"])
def test_invalid_sequences(sequence: str) -> None:
    with pytest.raises(InvalidEscapeSequence):
        parse_ansi_escape(sequence)


def test_palette_selector_out_of_range() -> None:
    with pytest.raises(InvalidColorCode):
        parse_ansi_escape("\x1b[38;5;300m")
    with pytest.raises(InvalidColorCode):
        parse_ansi_escape("\x1b[48;2;0;256;0m")


def test_color_errors_share_a_base_class() -> None:
    with pytest.raises(ColorError):
        parse_ansi_escape("\x1b[99m")


def test_true_color_escape_format() -> None:
    assert rgb_to_ansi_escape(RGBColor(255, 204, 229)) == "\x1b[38;2;255;204;229m"
    assert rgb_to_ansi_escape(RGBColor(1, 2, 3), is_background=True) == "\x1b[48;2;1;2;3m"


@pytest.mark.parametrize(
    "color",
    [RGBColor(0, 0, 0), RGBColor(255, 255, 255), RGBColor(17, 128, 240), RGBColor(255, 204, 229)],
)
@pytest.mark.parametrize("is_background", [False, True])
def test_emitted_sequences_parse_back(color: RGBColor, is_background: bool) -> None:
    parsed = parse_ansi_escape(rgb_to_ansi_escape(color, is_background))
    assert parsed == AnsiColor(color, is_background)


def test_palette_escape_format() -> None:
    assert palette_index_to_ansi_escape(9) == "\x1b[38;5;9m"
    assert palette_index_to_ansi_escape(21, is_background=True) == "\x1b[48;5;21m"
    with pytest.raises(InvalidColorCode):
        palette_index_to_ansi_escape(256)


def test_named_palette_lookup() -> None:
    assert Color.lookup("red") is Color.RED
    assert Color.lookup(" YellowBG ") is Color.YELLOWBG
    assert Color.lookup("MEGENTABG") is Color.MAGENTABG
    assert Color.RED.value == "\x1b[31m"
    assert Color.REDBG.value == "\x1b[41m"
    assert Color.RESET.value == "\x1b[0m"
    with pytest.raises(UnknownPaletteName):
        Color.lookup("purple")

"""Conversions between the 256-color ANSI palette, escape sequences and RGB."""
from __future__ import annotations

import math
import re
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache

from labellog.core.errors import (
    InvalidColorCode,
    InvalidEscapeSequence,
    UnknownPaletteName,
    UnsupportedEscapeSequence,
)

ESC = "\x1b"
PALETTE_SIZE = 256

_ESCAPE_RE = re.compile(r"\x1b\[(\d+(?:;\d+)*)m")


@dataclass(frozen=True, slots=True)
class RGBColor:
    """A 24-bit color."""

    r: int
    g: int
    b: int

    def __post_init__(self) -> None:
        for channel in (self.r, self.g, self.b):
            if not 0 <= channel <= 255:
                raise InvalidColorCode(f"RGB channel out of range: {channel}")

    def as_tuple(self) -> tuple[int, int, int]:
        return (self.r, self.g, self.b)


@dataclass(frozen=True, slots=True)
class AnsiColor:
    """Result of parsing an escape sequence."""

    color: RGBColor
    is_background: bool = False


# Standard terminal colors for palette indices 0-15.
BASE_COLORS: tuple[RGBColor, ...] = (
    RGBColor(0, 0, 0),
    RGBColor(128, 0, 0),
    RGBColor(0, 128, 0),
    RGBColor(128, 128, 0),
    RGBColor(0, 0, 128),
    RGBColor(128, 0, 128),
    RGBColor(0, 128, 128),
    RGBColor(192, 192, 192),
    RGBColor(128, 128, 128),
    RGBColor(255, 0, 0),
    RGBColor(0, 255, 0),
    RGBColor(255, 255, 0),
    RGBColor(0, 0, 255),
    RGBColor(255, 0, 255),
    RGBColor(0, 255, 255),
    RGBColor(255, 255, 255),
)


class Color(str, Enum):
    """Named ANSI colors accepted in label configuration."""

    BLACK = "\x1b[30m"
    RED = "\x1b[31m"
    GREEN = "\x1b[32m"
    YELLOW = "\x1b[33m"
    BLUE = "\x1b[34m"
    MAGENTA = "\x1b[35m"
    CYAN = "\x1b[36m"
    WHITE = "\x1b[37m"
    BLACKBG = "\x1b[40m"
    REDBG = "\x1b[41m"
    GREENBG = "\x1b[42m"
    YELLOWBG = "\x1b[43m"
    BLUEBG = "\x1b[44m"
    MAGENTABG = "\x1b[45m"
    CYANBG = "\x1b[46m"
    WHITEBG = "\x1b[47m"
    RESET = "\x1b[0m"

    # Misspelling shipped by earlier releases, kept for configuration files.
    MEGENTABG = "\x1b[45m"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def lookup(cls, name: str) -> "Color":
        """Return the palette member for ``name`` (case-insensitive)."""

        try:
            return cls[name.strip().upper()]
        except KeyError:
            raise UnknownPaletteName(f"Unknown palette color: {name!r}") from None


RESET = Color.RESET.value


def palette_index_to_rgb(index: int) -> RGBColor:
    """Map an 8-bit palette index to its RGB value.

    Indices 0-15 use the standard terminal colors, 16-231 the 6x6x6 color
    cube and 232-255 the grayscale ramp.
    """

    if isinstance(index, bool) or not isinstance(index, int):
        raise InvalidColorCode(f"Invalid ANSI color code: {index!r}")
    if 0 <= index < 16:
        return BASE_COLORS[index]
    if 16 <= index < 232:
        index -= 16
        return RGBColor(
            (index // 36) * 51,
            ((index % 36) // 6) * 51,
            (index % 6) * 51,
        )
    if 232 <= index < PALETTE_SIZE:
        gray = (index - 232) * 10 + 8
        return RGBColor(gray, gray, gray)
    raise InvalidColorCode(f"Invalid ANSI color code: {index}")


@lru_cache(maxsize=1)
def _palette() -> tuple[RGBColor, ...]:
    return tuple(palette_index_to_rgb(i) for i in range(PALETTE_SIZE))


def rgb_to_nearest_palette_index(color: RGBColor) -> int:
    """Return the palette index closest to ``color`` in RGB space.

    The palette is scanned in index order and only a strictly smaller
    distance replaces the current best, so ties resolve to the lowest index.
    """

    closest_index = 0
    smallest_distance = math.inf
    for index, candidate in enumerate(_palette()):
        distance = math.sqrt(
            (candidate.r - color.r) ** 2
            + (candidate.g - color.g) ** 2
            + (candidate.b - color.b) ** 2
        )
        if distance < smallest_distance:
            smallest_distance = distance
            closest_index = index
    return closest_index


def parse_ansi_escape(sequence: str) -> AnsiColor:
    """Extract the color selected by an SGR escape sequence.

    Supported forms are the 8-color selectors ``ESC[30m``-``ESC[37m`` and
    ``ESC[40m``-``ESC[47m``, the 256-color selectors ``ESC[38;5;nm`` and
    ``ESC[48;5;nm``, and the true-color selectors ``ESC[38;2;r;g;bm`` and
    ``ESC[48;2;r;g;bm``.
    """

    match = _ESCAPE_RE.fullmatch(sequence) if isinstance(sequence, str) else None
    if match is None:
        raise InvalidEscapeSequence(f"Invalid ANSI escape sequence: {sequence!r}")

    codes = [int(part) for part in match.group(1).split(";")]

    if len(codes) == 1:
        code = codes[0]
        if 30 <= code <= 37:
            return AnsiColor(BASE_COLORS[code - 30], is_background=False)
        if 40 <= code <= 47:
            return AnsiColor(BASE_COLORS[code - 40], is_background=True)

    if len(codes) == 3 and codes[0] in (38, 48) and codes[1] == 5:
        return AnsiColor(palette_index_to_rgb(codes[2]), is_background=codes[0] == 48)

    if len(codes) == 5 and codes[0] in (38, 48) and codes[1] == 2:
        return AnsiColor(RGBColor(*codes[2:]), is_background=codes[0] == 48)

    raise UnsupportedEscapeSequence(f"Unsupported ANSI escape sequence: {sequence!r}")


def rgb_to_ansi_escape(color: RGBColor, is_background: bool = False) -> str:
    """Build a true-color escape sequence for ``color``."""

    selector = 48 if is_background else 38
    return f"{ESC}[{selector};2;{color.r};{color.g};{color.b}m"


def palette_index_to_ansi_escape(index: int, is_background: bool = False) -> str:
    """Build a 256-color escape sequence for a palette index."""

    if not 0 <= index < PALETTE_SIZE:
        raise InvalidColorCode(f"Invalid ANSI color code: {index}")
    selector = 48 if is_background else 38
    return f"{ESC}[{selector};5;{index}m"

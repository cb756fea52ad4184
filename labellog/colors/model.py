"""Color specifications attached to log labels."""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Union

from labellog.core.errors import InvalidColorCode, InvalidColorSpec

from .palette import ESC, Color, RGBColor


@dataclass(frozen=True, slots=True)
class NamedAnsi:
    """Reference to a member of the named ANSI palette."""

    name: str


@dataclass(frozen=True, slots=True)
class RawAnsi:
    """A literal escape sequence, validated only when rendered."""

    escape_sequence: str


@dataclass(frozen=True, slots=True)
class Rgb:
    """A 24-bit color, optionally applied to the background."""

    r: int
    g: int
    b: int
    is_background: bool = False

    def __post_init__(self) -> None:
        for channel in (self.r, self.g, self.b):
            if isinstance(channel, bool) or not isinstance(channel, int) or not 0 <= channel <= 255:
                raise InvalidColorCode(f"RGB channel out of range: {channel!r}")

    @property
    def color(self) -> RGBColor:
        return RGBColor(self.r, self.g, self.b)


ColorSpec = Union[NamedAnsi, RawAnsi, Rgb]

_ANSI_KEYS = ("ansiCode", "ansi_code", "ansi")
_BACKGROUND_KEYS = ("isBackground", "is_background", "background")


def _channel(mapping: Mapping[str, Any], name: str) -> Any:
    for key in (name.upper(), name.lower()):
        if key in mapping:
            return mapping[key]
    raise InvalidColorSpec(f"RGB color is missing the {name.upper()} channel: {dict(mapping)!r}")


def parse_color_spec(value: Any) -> ColorSpec:
    """Normalise a color configuration value into a ``ColorSpec``.

    Accepted shapes:

    * a palette name such as ``"RED"`` or ``"yellowbg"`` (or a ``Color``),
    * a raw escape sequence such as ``"\\x1b[38;5;9m"``,
    * a mapping with an ``ansiCode`` entry,
    * a mapping with ``R``/``G``/``B`` entries and an optional ``isBackground``,
    * an existing ``NamedAnsi``/``RawAnsi``/``Rgb`` instance.

    Escape sequences are not checked here; a malformed one only fails when a
    message is rendered with it.
    """

    if isinstance(value, (NamedAnsi, RawAnsi, Rgb)):
        return value
    if isinstance(value, Color):
        return NamedAnsi(value.name)
    if isinstance(value, str):
        if value.startswith(ESC):
            return RawAnsi(value)
        return NamedAnsi(value.strip().upper())
    if isinstance(value, Mapping):
        for key in _ANSI_KEYS:
            if key in value:
                return RawAnsi(str(value[key]))
        is_background = False
        for key in _BACKGROUND_KEYS:
            if key in value:
                is_background = bool(value[key])
                break
        return Rgb(
            _channel(value, "r"),
            _channel(value, "g"),
            _channel(value, "b"),
            is_background=is_background,
        )
    if isinstance(value, RGBColor):
        return Rgb(value.r, value.g, value.b)
    raise InvalidColorSpec(f"Unsupported color specification: {value!r}")

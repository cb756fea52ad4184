"""Color model: palette conversions and label color specifications."""

from .model import ColorSpec, NamedAnsi, RawAnsi, Rgb, parse_color_spec  # noqa: F401
from .palette import (  # noqa: F401
    BASE_COLORS,
    RESET,
    AnsiColor,
    Color,
    RGBColor,
    palette_index_to_ansi_escape,
    palette_index_to_rgb,
    parse_ansi_escape,
    rgb_to_ansi_escape,
    rgb_to_nearest_palette_index,
)

__all__ = [
    "AnsiColor",
    "BASE_COLORS",
    "Color",
    "ColorSpec",
    "NamedAnsi",
    "RESET",
    "RGBColor",
    "RawAnsi",
    "Rgb",
    "palette_index_to_ansi_escape",
    "palette_index_to_rgb",
    "parse_ansi_escape",
    "parse_color_spec",
    "rgb_to_ansi_escape",
    "rgb_to_nearest_palette_index",
]

"""Labelled, colored logging for terminals, browser consoles and log files."""

from labellog.colors import Color, RGBColor  # noqa: F401
from labellog.core.config import LoggerOptions, get_options  # noqa: F401
from labellog.core.errors import (  # noqa: F401
    ColorError,
    InvalidColorCode,
    InvalidEscapeSequence,
    LabellogError,
    RotationIOError,
    UnknownLabel,
    UnsupportedEscapeSequence,
)
from labellog.labels import DEFAULT_LABELS, LabelRegistry  # noqa: F401
from labellog.logger import Logger  # noqa: F401
from labellog.render import RenderTarget  # noqa: F401

__all__ = [
    "Color",
    "ColorError",
    "DEFAULT_LABELS",
    "InvalidColorCode",
    "InvalidEscapeSequence",
    "LabelRegistry",
    "LabellogError",
    "Logger",
    "LoggerOptions",
    "RGBColor",
    "RenderTarget",
    "RotationIOError",
    "UnknownLabel",
    "UnsupportedEscapeSequence",
    "get_options",
]

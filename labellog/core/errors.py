"""Exception hierarchy shared across the logging core."""
from __future__ import annotations


class LabellogError(Exception):
    """Base class for every error raised by labellog."""


class ColorError(LabellogError):
    """Raised when a color cannot be converted or rendered."""


class InvalidColorCode(ColorError, ValueError):
    """Raised for palette indices or RGB channels outside ``0..255``."""


class InvalidEscapeSequence(ColorError, ValueError):
    """Raised when a string does not follow the ``ESC[<codes>m`` grammar."""


class UnsupportedEscapeSequence(ColorError, ValueError):
    """Raised for well-formed escape sequences that do not select a color."""


class UnknownPaletteName(ColorError, KeyError):
    """Raised when a named color is not part of the ANSI palette."""

    def __str__(self) -> str:
        return Exception.__str__(self)


class InvalidColorSpec(ColorError, TypeError):
    """Raised when a color configuration value has an unrecognised shape."""


class UnknownLabel(LabellogError, KeyError):
    """Raised when a log call uses a label that is not registered."""

    def __init__(self, label: str) -> None:
        super().__init__(label)
        self.label = label

    def __str__(self) -> str:
        return f"Unknown log label: {self.label!r}"


class RegistryFrozen(LabellogError):
    """Raised when a frozen label registry is modified."""


class RotationIOError(LabellogError, OSError):
    """Raised (and reported) when the log file cannot be rotated."""


class SerializationError(LabellogError):
    """Raised when a message cannot be converted to text for persistence."""

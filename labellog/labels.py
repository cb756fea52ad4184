"""Registry binding log labels to their colors."""
from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from typing import Any, Dict

from labellog.colors import ColorSpec, NamedAnsi, parse_color_spec
from labellog.core.errors import RegistryFrozen, UnknownLabel
from labellog.core.log import get_logger

LOGGER = get_logger(__name__)

DEFAULT_LABELS: Mapping[str, ColorSpec] = {
    "error": NamedAnsi("RED"),
    "warning": NamedAnsi("YELLOW"),
    "info": NamedAnsi("CYAN"),
    "success": NamedAnsi("GREEN"),
    "log": NamedAnsi("WHITE"),
    "notify": NamedAnsi("BLUE"),
    "alert": NamedAnsi("YELLOWBG"),
    "critical": NamedAnsi("REDBG"),
}


def _normalise(label: str) -> str:
    return label.strip().lower()


class LabelRegistry:
    """Per-logger mapping from label name to ``ColorSpec``.

    The registry starts from ``DEFAULT_LABELS``; overrides are merged in order
    so the last entry for a label wins. Once frozen it can no longer change.
    """

    def __init__(self, overrides: Iterable[Mapping[str, Any]] = ()) -> None:
        self._labels: Dict[str, ColorSpec] = dict(DEFAULT_LABELS)
        self._frozen = False
        self.merge(overrides)

    @classmethod
    def from_overrides(cls, overrides: Iterable[Mapping[str, Any]] = ()) -> "LabelRegistry":
        """Build a frozen registry from the defaults plus ``overrides``."""

        registry = cls(overrides)
        registry.freeze()
        return registry

    def merge(self, overrides: Iterable[Mapping[str, Any]]) -> None:
        """Apply ``{"label": ..., "color": ...}`` entries in order.

        Entries missing either field are skipped.
        """

        for entry in overrides:
            label = entry.get("label")
            color = entry.get("color")
            if not label or not color:
                LOGGER.debug("Skipping incomplete label override: %r", entry)
                continue
            self.register(label, color)

    def register(self, label: str, color: Any) -> None:
        if self._frozen:
            raise RegistryFrozen(f"Cannot register {label!r}: label registry is frozen")
        self._labels[_normalise(label)] = parse_color_spec(color)

    def freeze(self) -> None:
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def resolve(self, label: str) -> ColorSpec:
        """Return the color for ``label`` (case-insensitive)."""

        try:
            return self._labels[_normalise(label)]
        except KeyError:
            raise UnknownLabel(label) from None

    def labels(self) -> tuple[str, ...]:
        return tuple(self._labels)

    def __contains__(self, label: object) -> bool:
        return isinstance(label, str) and _normalise(label) in self._labels

    def __iter__(self) -> Iterator[str]:
        return iter(self._labels)

    def __len__(self) -> int:
        return len(self._labels)

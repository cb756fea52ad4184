"""Build the textual prefix and persisted line for a log message."""
from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable

from labellog.caller import current_caller
from labellog.core.errors import SerializationError

UNSERIALIZABLE_PLACEHOLDER = "[Unserializable message]"
PREFIX_SEPARATOR = ": "


def iso_timestamp() -> str:
    """Current local time as ISO-8601 with UTC offset, seconds precision."""

    return datetime.now().astimezone().isoformat(timespec="seconds")


@dataclass(frozen=True, slots=True)
class FormatOptions:
    """Which prefix segments are printed."""

    print_timestamp: bool = False
    print_label_name: bool = False
    print_caller_function_location: bool = False

    @property
    def any_enabled(self) -> bool:
        return self.print_timestamp or self.print_label_name or self.print_caller_function_location


class MessageFormatter:
    """Compose ``[timestamp] [LABEL] [Function caller] : `` prefixes.

    Segments always appear in that order; disabled ones are left out and an
    all-disabled formatter yields an empty prefix.
    """

    def __init__(
        self,
        options: FormatOptions | None = None,
        *,
        clock: Callable[[], str] = iso_timestamp,
        caller: Callable[[], str] = current_caller,
    ) -> None:
        self.options = options or FormatOptions()
        self._clock = clock
        self._caller = caller

    def format(self, label: str) -> str:
        prefix = ""
        if self.options.print_timestamp:
            prefix += f"[{self._clock()}] "
        if self.options.print_label_name:
            prefix += f"[{label.upper()}] "
        if self.options.print_caller_function_location:
            prefix += f"[Function {self._caller()}] "
        if self.options.any_enabled:
            prefix += PREFIX_SEPARATOR
        return prefix


def _to_text(message: Any) -> str:
    if isinstance(message, str):
        return message
    try:
        return json.dumps(message)
    except (TypeError, ValueError) as exc:
        raise SerializationError(f"Cannot serialise {type(message).__name__}") from exc


def serialize_message(message: Any) -> str:
    """Return ``message`` as text; never raises."""

    try:
        return _to_text(message)
    except SerializationError:
        return UNSERIALIZABLE_PLACEHOLDER


def format_line(prefix: str, message: Any) -> str:
    """The line written to the log file for one call."""

    return f"{prefix} {serialize_message(message)}\n"

"""Logger options and their environment-backed defaults."""
from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date
from functools import lru_cache
from pathlib import Path
from typing import Any, Optional, Tuple

from dotenv import load_dotenv

from labellog.formatting import FormatOptions
from labellog.rotation import RotationMode, RotationPolicy

DEFAULT_ROTATION_INTERVAL_MS = 24 * 60 * 60 * 1000
DEFAULT_LOG_FOLDER = "logs"
LOG_FILE_DATE_FORMAT = "%d-%m-%Y"

_TRUE_VALUES = {"1", "true", "yes", "on"}

# camelCase keys used by existing configuration files.
_OPTION_ALIASES = {
    "saveLogFile": "save_log_file",
    "logFolderPath": "log_folder_path",
    "logFileName": "log_file_name",
    "logRotationInterval": "log_rotation_interval",
    "logRotationMode": "log_rotation_mode",
    "customLabels": "custom_labels",
    "printTimestamp": "print_timestamp",
    "printLabelName": "print_label_name",
    "printCallerFunctionLocation": "print_caller_function_location",
}


def _load_env(dotenv_path: Optional[Path] = None) -> None:
    """Load the .env file once for the process."""

    if getattr(_load_env, "_loaded", False):  # type: ignore[attr-defined]
        return

    load_dotenv(dotenv_path)
    setattr(_load_env, "_loaded", True)  # type: ignore[attr-defined]


def _parse_bool(value: str | None, default: bool) -> bool:
    if value is None or value == "":
        return default
    return value.strip().lower() in _TRUE_VALUES


def _parse_custom_labels(value: str) -> Tuple[dict[str, str], ...]:
    labels: list[dict[str, str]] = []
    for item in value.split(","):
        item = item.strip()
        if not item:
            continue
        if ":" not in item:
            raise ValueError("Custom labels must follow '<label>:<COLOR>' format.")
        label, color = item.split(":", 1)
        label = label.strip()
        color = color.strip()
        if not label or not color:
            raise ValueError("Invalid custom label: label and color required.")
        labels.append({"label": label, "color": color})
    return tuple(labels)


@dataclass(frozen=True)
class LoggerOptions:
    """Options accepted by ``labellog.Logger``."""

    save_log_file: bool = False
    log_folder_path: Optional[str] = None
    log_file_name: Optional[str] = None
    log_rotation_interval: int = DEFAULT_ROTATION_INTERVAL_MS
    log_rotation_mode: str = RotationMode.SIZE.value
    custom_labels: Tuple[Mapping[str, Any], ...] = field(default_factory=tuple)
    print_timestamp: bool = False
    print_label_name: bool = False
    print_caller_function_location: bool = False

    def __post_init__(self) -> None:
        if self.log_rotation_interval <= 0:
            raise ValueError("log_rotation_interval must be a positive integer")
        RotationMode(self.log_rotation_mode)
        object.__setattr__(self, "custom_labels", tuple(self.custom_labels or ()))

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "LoggerOptions":
        """Build options from a mapping using snake_case or camelCase keys.

        Unknown keys are ignored.
        """

        known = {name for name in cls.__dataclass_fields__}
        kwargs: dict[str, Any] = {}
        for key, value in values.items():
            name = _OPTION_ALIASES.get(key, key)
            if name in known and value is not None:
                kwargs[name] = value
        return cls(**kwargs)

    @classmethod
    def from_env(cls, dotenv_path: Optional[Path] = None) -> "LoggerOptions":
        """Instantiate options from ``LABELLOG_*`` environment variables."""

        _load_env(dotenv_path)
        defaults = cls()
        return cls(
            save_log_file=_parse_bool(os.getenv("LABELLOG_SAVE_LOG_FILE"), defaults.save_log_file),
            log_folder_path=os.getenv("LABELLOG_LOG_FOLDER_PATH") or defaults.log_folder_path,
            log_file_name=os.getenv("LABELLOG_LOG_FILE_NAME") or defaults.log_file_name,
            log_rotation_interval=int(
                os.getenv("LABELLOG_LOG_ROTATION_INTERVAL", defaults.log_rotation_interval)
            ),
            log_rotation_mode=os.getenv("LABELLOG_LOG_ROTATION_MODE", defaults.log_rotation_mode).lower(),
            custom_labels=_parse_custom_labels(os.getenv("LABELLOG_CUSTOM_LABELS", "")),
            print_timestamp=_parse_bool(os.getenv("LABELLOG_PRINT_TIMESTAMP"), defaults.print_timestamp),
            print_label_name=_parse_bool(os.getenv("LABELLOG_PRINT_LABEL_NAME"), defaults.print_label_name),
            print_caller_function_location=_parse_bool(
                os.getenv("LABELLOG_PRINT_CALLER_FUNCTION_LOCATION"),
                defaults.print_caller_function_location,
            ),
        )

    def resolve_log_directory(self, cwd: Optional[Path] = None) -> Path:
        base = Path(cwd) if cwd is not None else Path.cwd()
        if self.log_folder_path:
            return (base / self.log_folder_path).resolve()
        return base / DEFAULT_LOG_FOLDER

    def resolve_log_file(self, cwd: Optional[Path] = None, today: Optional[date] = None) -> Path:
        filename = self.log_file_name or f"{(today or date.today()).strftime(LOG_FILE_DATE_FORMAT)}.log"
        return self.resolve_log_directory(cwd) / filename

    def format_options(self) -> FormatOptions:
        return FormatOptions(
            print_timestamp=self.print_timestamp,
            print_label_name=self.print_label_name,
            print_caller_function_location=self.print_caller_function_location,
        )

    def rotation_policy(self) -> RotationPolicy:
        return RotationPolicy(
            threshold=self.log_rotation_interval,
            mode=RotationMode(self.log_rotation_mode),
            interval_ms=self.log_rotation_interval,
        )


@lru_cache(maxsize=1)
def get_options() -> LoggerOptions:
    """Return cached ``LoggerOptions`` built from the environment."""

    options = LoggerOptions.from_env()

    from .log import get_logger

    logger = get_logger(__name__)
    logger.debug(
        "Options initialised: save_log_file=%s rotation=%s/%s labels=%s",
        options.save_log_file,
        options.log_rotation_mode,
        options.log_rotation_interval,
        [entry.get("label") for entry in options.custom_labels],
    )
    return options

"""Public ``Logger``: labelled, colored console output with optional file persistence."""
from __future__ import annotations

from collections.abc import Mapping
from functools import partial
from pathlib import Path
from typing import Any, Callable, Optional

from labellog.core.config import LoggerOptions
from labellog.core.log import get_logger
from labellog.formatting import MessageFormatter, format_line, iso_timestamp
from labellog.labels import LabelRegistry
from labellog.render import (
    ConsoleCall,
    ConsoleWriter,
    RenderDispatcher,
    RenderTarget,
    detect_render_target,
    supports_true_color,
)
from labellog.rotation import ErrorCallback, RotationManager

LOGGER = get_logger(__name__)


class Logger:
    """Log messages under colored labels.

    Every registered label is available as a method::

        logger = Logger({"printLabelName": True, "customLabels": [{"label": "audit", "color": "MAGENTA"}]})
        logger.info("started")
        logger.audit("user created")

    Methods of this class take precedence over labels of the same name; such
    labels remain reachable through ``emit``.
    """

    def __init__(
        self,
        options: LoggerOptions | Mapping[str, Any] | None = None,
        *,
        registry: Optional[LabelRegistry] = None,
        target: Optional[RenderTarget] = None,
        writer: Optional[ConsoleWriter] = None,
        clock: Callable[[], str] = iso_timestamp,
        cwd: Optional[Path] = None,
        on_file_error: Optional[ErrorCallback] = None,
    ) -> None:
        if options is None:
            options = LoggerOptions()
        elif not isinstance(options, LoggerOptions):
            options = LoggerOptions.from_mapping(options)
        self.options = options
        self.registry = registry or LabelRegistry.from_overrides(options.custom_labels)
        self.target = target or detect_render_target()
        self.formatter = MessageFormatter(options.format_options(), clock=clock)
        self.dispatcher = RenderDispatcher(self.target, writer, true_color=supports_true_color())
        self.rotation: Optional[RotationManager] = None

        if options.save_log_file:
            if self.target is RenderTarget.BROWSER:
                LOGGER.warning("Log file saving is not available in a browser console; disabled")
            else:
                self.rotation = RotationManager(
                    options.resolve_log_file(cwd),
                    options.rotation_policy(),
                    on_error=on_file_error,
                )
                self.rotation.open()
                self.rotation.start()

    def __enter__(self) -> "Logger":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __getattr__(self, name: str) -> Callable[[Any], ConsoleCall]:
        registry = self.__dict__.get("registry")
        if registry is not None and not name.startswith("_") and name in registry:
            return partial(self.emit, name)
        raise AttributeError(f"{type(self).__name__!s} has no label or attribute {name!r}")

    def __dir__(self) -> list[str]:
        return sorted(set(super().__dir__()) | set(self.registry.labels()))

    @property
    def labels(self) -> tuple[str, ...]:
        return self.registry.labels()

    @property
    def log_file(self) -> Optional[Path]:
        return self.rotation.path if self.rotation else None

    def emit(self, label: str, message: Any) -> ConsoleCall:
        """Log ``message`` under ``label`` and return the console call made.

        Raises ``UnknownLabel`` for labels that are not registered.
        """

        color = self.registry.resolve(label)
        prefix = self.formatter.format(label)
        call = self.dispatcher.render(color, prefix, message)
        if self.rotation is not None:
            self.rotation.write(format_line(prefix, message))
        return call

    def close(self) -> None:
        """Stop the rotation timer and close the log file."""

        if self.rotation is not None:
            self.rotation.close()

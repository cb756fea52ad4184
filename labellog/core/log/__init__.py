"""Diagnostics logging for labellog itself, rendered with rich."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from threading import RLock

from rich.console import Console
from rich.logging import RichHandler
from rich.traceback import install as install_rich_traceback

__all__ = [
    "LoggingConfig",
    "init_logging",
    "get_logger",
    "set_level",
    "shutdown_logging",
]

NAMESPACE = "labellog"


@dataclass
class LoggingConfig:
    """Runtime configuration for the diagnostics logger."""

    level: str | int = "WARNING"
    console: bool = True
    rich_tracebacks: bool = False
    stderr: bool = True


_config_lock = RLock()
_config: LoggingConfig | None = None


def _parse_level(level: str | int) -> int:
    if isinstance(level, int):
        return level
    return getattr(logging, str(level).upper(), logging.WARNING)


def _build_handlers(cfg: LoggingConfig, level: int) -> list[logging.Handler]:
    handlers: list[logging.Handler] = []

    if cfg.rich_tracebacks:
        install_rich_traceback(show_locals=False)

    if cfg.console:
        rich_handler = RichHandler(
            console=Console(stderr=cfg.stderr),
            rich_tracebacks=cfg.rich_tracebacks,
            show_level=True,
            show_path=False,
            markup=False,
            log_time_format="%Y-%m-%d %H:%M:%S",
        )
        rich_handler.setLevel(level)
        rich_handler.setFormatter(logging.Formatter("%(message)s"))
        handlers.append(rich_handler)

    return handlers


def init_logging(**kwargs: object) -> None:
    """Configure the ``labellog`` diagnostics logger.

    The function is idempotent; repeated calls reuse the existing configuration
    unless explicit keyword arguments request a different level or options.
    Only the ``labellog`` namespace is touched, records still propagate to the
    application's own handlers.
    """

    with _config_lock:
        global _config

        cfg = LoggingConfig()
        for key, value in kwargs.items():
            if hasattr(cfg, key):
                setattr(cfg, key, value)  # type: ignore[arg-type]

        if _config is not None:
            if _config == cfg:
                return
            _teardown_locked()
        level = _parse_level(cfg.level)

        root = logging.getLogger(NAMESPACE)
        root.setLevel(level)
        for handler in _build_handlers(cfg, level):
            root.addHandler(handler)

        _config = cfg


def _teardown_locked() -> None:
    global _config
    _config = None
    root = logging.getLogger(NAMESPACE)
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    root.setLevel(logging.NOTSET)


def shutdown_logging() -> None:
    """Remove the diagnostics handlers, intended for tests."""

    with _config_lock:
        _teardown_locked()


def get_logger(name: str | None = None) -> logging.Logger:
    with _config_lock:
        if _config is None:
            init_logging()
    if not name or name == NAMESPACE or name.startswith(f"{NAMESPACE}."):
        return logging.getLogger(name or NAMESPACE)
    return logging.getLogger(f"{NAMESPACE}.{name}")


def set_level(level: str | int) -> None:
    new_level = _parse_level(level)
    root = logging.getLogger(NAMESPACE)
    for handler in root.handlers:
        handler.setLevel(new_level)
    root.setLevel(new_level)

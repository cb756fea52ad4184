"""Append-only log file sink with size- or time-based rotation."""
from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Optional, TextIO

from labellog.core.errors import RotationIOError
from labellog.core.log import get_logger

LOGGER = get_logger(__name__)

ErrorCallback = Callable[[OSError], None]


class RotationMode(str, Enum):
    SIZE = "size"
    TIME = "time"


class RotationState(Enum):
    UNINITIALIZED = "uninitialized"
    ACTIVE = "active"
    ROTATING = "rotating"
    CLOSED = "closed"


@dataclass(frozen=True)
class RotationPolicy:
    """When to rotate and how often to check.

    ``threshold`` is a byte count in size mode and milliseconds in time mode.
    ``interval_ms`` is the period of the background check and defaults to the
    threshold.
    """

    threshold: int
    mode: RotationMode = RotationMode.SIZE
    interval_ms: Optional[int] = None

    def __post_init__(self) -> None:
        if self.threshold <= 0:
            raise ValueError("Rotation threshold must be positive")
        if self.interval_ms is not None and self.interval_ms <= 0:
            raise ValueError("Rotation check interval must be positive")
        object.__setattr__(self, "mode", RotationMode(self.mode))

    @property
    def check_interval_seconds(self) -> float:
        return (self.interval_ms or self.threshold) / 1000.0


class RotationManager:
    """Own the log file sink and replace it when the policy threshold is crossed.

    Rotation closes the current file, deletes it and opens a fresh one at the
    same path. If the file cannot be deleted or reopened the manager is left
    degraded: the old sink stays closed, writes are dropped and the failure
    is reported until a later periodic check rotates successfully.
    """

    def __init__(
        self,
        path: Path | str,
        policy: RotationPolicy,
        *,
        on_error: Optional[ErrorCallback] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.path = Path(path)
        self.policy = policy
        self._on_error = on_error
        self._clock = clock
        self._lock = threading.RLock()
        self._stream: Optional[TextIO] = None
        self._timer: Optional[threading.Timer] = None
        self._opened_at = 0.0
        self.state = RotationState.UNINITIALIZED
        self.bytes_written = 0
        self.rotations = 0
        self.degraded = False
        self.last_error: Optional[OSError] = None

    def __enter__(self) -> "RotationManager":
        if self.state is RotationState.UNINITIALIZED:
            self.open()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _open_sink(self) -> TextIO:
        return open(self.path, "a", encoding="utf-8", newline="")

    def open(self) -> None:
        """Create the log directory if needed and open the append sink."""

        with self._lock:
            if self.state is not RotationState.UNINITIALIZED:
                raise RuntimeError(f"Rotation manager already {self.state.value}")
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._stream = self._open_sink()
            self._opened_at = self._clock()
            self.bytes_written = 0
            self.state = RotationState.ACTIVE
            LOGGER.debug("Opened log file %s", self.path)

    def start(self) -> None:
        """Schedule the periodic rotation check."""

        with self._lock:
            if self.state is RotationState.CLOSED or self._timer is not None:
                return
            self._schedule_locked()

    def _schedule_locked(self) -> None:
        timer = threading.Timer(self.policy.check_interval_seconds, self._tick)
        timer.daemon = True
        timer.name = "labellog-rotation"
        self._timer = timer
        timer.start()

    def _tick(self) -> None:
        try:
            self.check()
        finally:
            with self._lock:
                self._timer = None
                if self.state is not RotationState.CLOSED:
                    self._schedule_locked()

    def _threshold_crossed(self) -> bool:
        if self.policy.mode is RotationMode.SIZE:
            return self.bytes_written > self.policy.threshold
        elapsed_ms = (self._clock() - self._opened_at) * 1000.0
        return elapsed_ms >= self.policy.threshold

    def write(self, line: str) -> bool:
        """Append ``line``; returns whether it reached the sink.

        In size mode a counter already past the threshold rotates the file
        before the line is appended. I/O failures are reported, never raised.
        """

        with self._lock:
            if self.state is not RotationState.ACTIVE:
                LOGGER.warning("Dropping log line: log file is %s", self.state.value)
                return False
            if (
                not self.degraded
                and self.policy.mode is RotationMode.SIZE
                and self._threshold_crossed()
            ):
                self._rotate_locked()
            if self._stream is None:
                LOGGER.warning("Dropping log line: log file %s is unavailable", self.path)
                return False
            try:
                self._stream.write(line)
                self._stream.flush()
            except OSError as exc:
                self._report(exc)
                return False
            self.bytes_written += len(line.encode("utf-8"))
            return True

    def check(self) -> bool:
        """Rotate if the policy threshold has been crossed."""

        with self._lock:
            if self.state is not RotationState.ACTIVE or not self._threshold_crossed():
                return False
            return self._rotate_locked()

    def rotate(self) -> bool:
        """Rotate unconditionally; returns whether a fresh sink is open."""

        with self._lock:
            if self.state is not RotationState.ACTIVE:
                return False
            return self._rotate_locked()

    def _rotate_locked(self) -> bool:
        self.state = RotationState.ROTATING
        try:
            self._close_stream()
        except OSError as exc:
            self._report(exc)
        try:
            self.path.unlink(missing_ok=True)
        except OSError as exc:
            return self._fail(f"Error deleting log file {self.path}", exc)
        try:
            self._stream = self._open_sink()
        except OSError as exc:
            return self._fail(f"Error creating log file {self.path}", exc)
        self.bytes_written = 0
        self._opened_at = self._clock()
        self.degraded = False
        self.rotations += 1
        self.state = RotationState.ACTIVE
        LOGGER.info("Log file rotated successfully: %s", self.path)
        return True

    def _fail(self, message: str, cause: OSError) -> bool:
        error = RotationIOError(f"{message}: {cause}")
        error.__cause__ = cause
        self.degraded = True
        self.state = RotationState.ACTIVE
        self._report(error)
        return False

    def _report(self, error: OSError) -> None:
        self.last_error = error
        LOGGER.error("%s", error)
        if self._on_error is None:
            return
        try:
            self._on_error(error)
        except Exception:
            LOGGER.exception("Log file error callback failed")

    def _close_stream(self) -> None:
        stream, self._stream = self._stream, None
        if stream is None:
            return
        try:
            stream.flush()
        finally:
            stream.close()

    def close(self) -> None:
        """Cancel the periodic check and close the sink."""

        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            if self.state is RotationState.CLOSED:
                return
            try:
                self._close_stream()
            except OSError as exc:
                self._report(exc)
            self.state = RotationState.CLOSED

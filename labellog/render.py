"""Turn a label color into console output for the active environment."""
from __future__ import annotations

import importlib
import os
import sys
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Any, Callable, Optional, Protocol

from rich.console import Console
from rich.text import Text

from labellog.colors import (
    RESET,
    Color,
    ColorSpec,
    NamedAnsi,
    RawAnsi,
    Rgb,
    palette_index_to_ansi_escape,
    parse_ansi_escape,
    rgb_to_ansi_escape,
    rgb_to_nearest_palette_index,
)
from labellog.core.errors import ColorError, InvalidColorSpec
from labellog.core.log import get_logger

LOGGER = get_logger(__name__)

BROWSER_STYLE_MARKER = "%c"


class RenderTarget(str, Enum):
    """Console environments that need different styling directives."""

    TERMINAL = "terminal"
    BROWSER = "browser"
    PLAIN = "plain"


def _probe_target() -> RenderTarget:
    if sys.platform == "emscripten":
        return RenderTarget.BROWSER
    if os.getenv("NO_COLOR"):
        return RenderTarget.PLAIN
    if os.getenv("FORCE_COLOR"):
        return RenderTarget.TERMINAL
    stream = sys.stdout
    if stream is not None and hasattr(stream, "isatty") and stream.isatty():
        return RenderTarget.TERMINAL
    return RenderTarget.PLAIN


@lru_cache(maxsize=1)
def detect_render_target() -> RenderTarget:
    """Probe the environment once per process."""

    target = _probe_target()
    LOGGER.debug("Render target detected: %s", target.value)
    return target


def supports_true_color() -> bool:
    return os.getenv("COLORTERM", "").lower() in {"truecolor", "24bit"}


def _named(spec: NamedAnsi) -> str:
    return Color.lookup(spec.name).value


def ansi_for(spec: ColorSpec, *, true_color: bool = True) -> str:
    """Escape sequence for a terminal.

    Raw sequences are passed through untouched. Without true-color support
    RGB colors are mapped to the nearest 256-color palette entry.
    """

    if isinstance(spec, RawAnsi):
        return spec.escape_sequence
    if isinstance(spec, NamedAnsi):
        return _named(spec)
    if isinstance(spec, Rgb):
        if true_color:
            return rgb_to_ansi_escape(spec.color, spec.is_background)
        index = rgb_to_nearest_palette_index(spec.color)
        return palette_index_to_ansi_escape(index, spec.is_background)
    raise InvalidColorSpec(f"Unsupported color specification: {spec!r}")


def css_for(spec: ColorSpec) -> str:
    """CSS directive for a browser-style console."""

    if isinstance(spec, Rgb):
        color, is_background = spec.color, spec.is_background
    elif isinstance(spec, RawAnsi):
        parsed = parse_ansi_escape(spec.escape_sequence)
        color, is_background = parsed.color, parsed.is_background
    elif isinstance(spec, NamedAnsi):
        parsed = parse_ansi_escape(_named(spec))
        color, is_background = parsed.color, parsed.is_background
    else:
        raise InvalidColorSpec(f"Unsupported color specification: {spec!r}")
    prop = "background" if is_background else "color"
    return f"{prop}: rgb({color.r}, {color.g}, {color.b});"


def display_message(message: Any) -> str:
    return message if isinstance(message, str) else str(message)


@dataclass(frozen=True, slots=True)
class ConsoleCall:
    """Arguments of a single console call, shaped for ``target``."""

    target: RenderTarget
    args: tuple[str, ...]


class ConsoleWriter(Protocol):
    """Destination for console calls."""

    def write(self, call: ConsoleCall) -> None:
        ...


class RichConsoleWriter:
    """Write terminal and plain calls through a rich ``Console``."""

    def __init__(self, console: Optional[Console] = None) -> None:
        self._console = console or Console(highlight=False, emoji=False)

    @property
    def console(self) -> Console:
        return self._console

    def write(self, call: ConsoleCall) -> None:
        if call.target is RenderTarget.TERMINAL:
            ansi, prefix, text, reset = call.args
            self._console.print(Text.from_ansi(f"{ansi} {prefix} {text}{reset}"), soft_wrap=True)
        elif call.target is RenderTarget.BROWSER:
            # No CSS support here: drop the directive, keep the text.
            text = call.args[0].replace(BROWSER_STYLE_MARKER, "", 1).lstrip()
            self._console.print(text, markup=False, highlight=False, emoji=False, soft_wrap=True)
        else:
            self._console.print(
                *call.args, markup=False, highlight=False, emoji=False, soft_wrap=True
            )


class BrowserConsoleWriter:
    """Forward calls to the browser console when running under Pyodide."""

    def __init__(self, console_log: Optional[Callable[..., Any]] = None) -> None:
        self._console_log = console_log

    def _resolve(self) -> Callable[..., Any]:
        if self._console_log is None:
            js = importlib.import_module("js")
            self._console_log = js.console.log
        return self._console_log

    def write(self, call: ConsoleCall) -> None:
        self._resolve()(*call.args)


def default_writer(target: RenderTarget) -> ConsoleWriter:
    if target is RenderTarget.BROWSER:
        return BrowserConsoleWriter()
    return RichConsoleWriter()


class RenderDispatcher:
    """Build and emit styled console calls for one render target."""

    def __init__(
        self,
        target: RenderTarget,
        writer: Optional[ConsoleWriter] = None,
        *,
        true_color: bool = True,
    ) -> None:
        self.target = target
        self.writer = writer or default_writer(target)
        self.true_color = true_color

    def build_call(self, spec: ColorSpec, prefix: str, message: Any) -> ConsoleCall:
        """Shape the console call; ``ColorError`` propagates to the caller."""

        text = display_message(message)
        if self.target is RenderTarget.TERMINAL:
            ansi = ansi_for(spec, true_color=self.true_color)
            return ConsoleCall(self.target, (ansi, prefix, text, RESET))
        if self.target is RenderTarget.BROWSER:
            css = css_for(spec)
            return ConsoleCall(self.target, (f"{BROWSER_STYLE_MARKER} {prefix} {text}", css))
        return self.plain_call(prefix, message)

    def plain_call(self, prefix: str, message: Any) -> ConsoleCall:
        return ConsoleCall(RenderTarget.PLAIN, (prefix, display_message(message)))

    def render(self, spec: ColorSpec, prefix: str, message: Any) -> ConsoleCall:
        """Emit one message; a broken color degrades to plain output."""

        try:
            call = self.build_call(spec, prefix, message)
        except ColorError as exc:
            LOGGER.warning("Cannot render color %r (%s); writing plain output", spec, exc)
            call = self.plain_call(prefix, message)
        self.writer.write(call)
        return call

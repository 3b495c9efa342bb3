"""Status-line formatting and output.

The status bar reads one line per update from our stdout and renders it
as Pango markup: three palette-colored dots followed by the brightness.
"""

from __future__ import annotations

import sys
from typing import TextIO

from ledbar.domain.models import LedConfig
from ledbar.domain.palettes import palette_colors

OFF_INDICATOR = "×"
RECOVERING_INDICATOR = "~~~"

# Nerd-font filled circle
DOT_GLYPH = ""


def format_brightness(brightness: float) -> str:
    return f"{round(brightness, 2) * 100:.0f}%"


def format_status(config: LedConfig) -> str:
    """Render a snapshot as a single status line."""
    if not config.on:
        return OFF_INDICATOR
    dots = "".join(
        f"<span color='{color}' rise='0.1pt'>{DOT_GLYPH}</span>"
        for color in palette_colors(config.palette)
    )
    return f"{dots} {format_brightness(config.global_brightness)}"


class StatusOutput:
    """Line-oriented writer for the status bar.

    Every line is flushed immediately; the bar only redraws on a full
    line. When no stream is given, the current ``sys.stdout`` is used.
    """

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream
        self._last_line: str | None = None

    @property
    def last_line(self) -> str | None:
        return self._last_line

    def write(self, line: str) -> None:
        stream = self._stream if self._stream is not None else sys.stdout
        stream.write(line + "\n")
        stream.flush()
        self._last_line = line

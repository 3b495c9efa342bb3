"""State transitions behind each command token.

Each command is turned into a partial-config patch describing only the
field it changes, computed relative to the currently held snapshot.
"""

from __future__ import annotations

import bisect
from typing import Any

from ledbar.domain.models import Command, LedConfig
from ledbar.domain.palettes import PALETTE_IDS

BRIGHTNESS_STEP = 0.1


def next_palette(current: int | None) -> int:
    """Next palette id in ascending order, wrapping to the first."""
    if current is None:
        return PALETTE_IDS[0]
    index = bisect.bisect_right(PALETTE_IDS, current)
    if index >= len(PALETTE_IDS):
        return PALETTE_IDS[0]
    return PALETTE_IDS[index]


def previous_palette(current: int | None) -> int:
    """Previous palette id in ascending order, wrapping to the last."""
    if current is None:
        return PALETTE_IDS[-1]
    index = bisect.bisect_left(PALETTE_IDS, current)
    if index == 0:
        return PALETTE_IDS[-1]
    return PALETTE_IDS[index - 1]


def adjust_brightness(value: float, delta: float) -> float:
    """Shift brightness by ``delta``, clamped to [0, 1] and rounded to 2 places."""
    return round(min(1.0, max(0.0, value + delta)), 2)


def toggle_power(on: bool) -> int:
    return 0 if on else 1


def build_patch(command: Command, config: LedConfig) -> dict[str, Any]:
    """Build the partial-config patch that applies ``command`` to ``config``."""
    if command is Command.PALETTE_UP:
        return {"groups": {"main": {"palette": next_palette(config.palette)}}}
    if command is Command.PALETTE_DOWN:
        return {"groups": {"main": {"palette": previous_palette(config.palette)}}}
    if command is Command.BRIGHTNESS_UP:
        return {"global_brightness": adjust_brightness(config.global_brightness, BRIGHTNESS_STEP)}
    if command is Command.BRIGHTNESS_DOWN:
        return {"global_brightness": adjust_brightness(config.global_brightness, -BRIGHTNESS_STEP)}
    if command is Command.POWER:
        return {"on": toggle_power(config.on)}
    raise ValueError(f"Unhandled command: {command!r}")

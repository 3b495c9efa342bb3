"""Palette catalog of the remote controller.

Maps each palette id to the three colors shown in the status line. The
ids, in ascending order, are also the sequence that palette_up and
palette_down step through.
"""

from __future__ import annotations

PALETTES: dict[int, tuple[str, str, str]] = {
    0: ("#ffb313", "#ff0e7e", "#467cff"),
    20: ("#ff3555", "#7b5dfe", "#0efbff"),
    50: ("#ff6e56", "#7bcfff", "#2b4cff"),
    51: ("#ff6043", "#ff92ec", "#296eff"),
    60: ("#ff7446", "#ff88bd", "#8136ff"),
    61: ("#ffad1e", "#88f3ff", "#3165ff"),
    70: ("#ff0000", "#ff8585", "#00adfe"),
    80: ("#ff0000", "#af00ff", "#0068ff"),
    90: ("#ffecd9", "#e02eff", "#8dc8ff"),
    100: ("#fe0062", "#fe698b", "#18ffbc"),
    101: ("#c90dff", "#fe4b99", "#0ae8ff"),
    102: ("#fecf42", "#ff5054", "#01f0ff"),
    200: ("#2068ff", "#309aff", "#84ceff"),
    210: ("#7901ff", "#0114ff", "#7768ff"),
    220: ("#ae41ff", "#3276ff", "#53cdff"),
    230: ("#ff5e9f", "#4753ff", "#8b13fe"),
    240: ("#ff0020", "#ff2079", "#ff4679"),
    250: ("#ff3082", "#ff3970", "#8dc8ff"),
    260: ("#ff5e53", "#ff5579", "#ff4de9"),
    270: ("#ff539b", "#ff4242", "#ffcc5e"),
    280: ("#ff0000", "#ff534e", "#ff8a00"),
    290: ("#ff7832", "#ff9e5b", "#fef480"),
    500: ("#ff0000", "#00ffff", "#ff0002"),
}

PALETTE_IDS: tuple[int, ...] = tuple(sorted(PALETTES))

# Shown when the controller reports a palette id missing from the catalog
PLACEHOLDER_COLORS: tuple[str, str, str] = ("#000000", "#000000", "#000000")


def palette_colors(palette_id: int | None) -> tuple[str, str, str]:
    if palette_id is None:
        return PLACEHOLDER_COLORS
    return PALETTES.get(palette_id, PLACEHOLDER_COLORS)

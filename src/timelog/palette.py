"""Deterministic chart colours for drill-down segments."""

import colorsys

# Start hue and fixed saturation/lightness for segment colours
BASE_HUE = 210 / 360
SATURATION = 0.55
LIGHTNESS = 0.55


def segment_colors(count: int, offset: float = BASE_HUE) -> list[str]:
    """Return ``count`` hex colours with evenly spaced hues.

    The same count always yields the same colours, so a segment keeps its colour
    when the view is re-rendered.
    """
    colors: list[str] = []
    for i in range(count):
        hue = (offset + i / max(count, 1)) % 1.0
        r, g, b = colorsys.hls_to_rgb(hue, LIGHTNESS, SATURATION)
        colors.append(f"#{round(r * 255):02x}{round(g * 255):02x}{round(b * 255):02x}")
    return colors

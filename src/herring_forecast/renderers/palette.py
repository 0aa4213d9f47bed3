"""Color ramp for spawn probability markers and the map legend."""

from __future__ import annotations

from dataclasses import dataclass

# ColorBrewer YlOrRd, 9 classes (light yellow = low, dark red = high)
YLORRD: tuple[str, ...] = (
    "#ffffcc",
    "#ffeda0",
    "#fed976",
    "#feb24c",
    "#fd8d3c",
    "#fc4e2a",
    "#e31a1c",
    "#bd0026",
    "#800026",
)


@dataclass(frozen=True)
class LegendEntry:
    """One swatch of the probability legend."""

    label: str
    color: str


def _hex_to_rgb(color: str) -> tuple[int, int, int]:
    value = color.lstrip("#")
    return int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16)


def interpolate_color(fraction: float, stops: tuple[str, ...] = YLORRD) -> str:
    """Color at ``fraction`` (0-1) along a ramp, interpolated linearly in RGB."""
    fraction = max(0.0, min(1.0, fraction))
    position = fraction * (len(stops) - 1)
    index = min(int(position), len(stops) - 2)
    weight = position - index
    start, end = _hex_to_rgb(stops[index]), _hex_to_rgb(stops[index + 1])
    rgb = (round(a + (b - a) * weight) for a, b in zip(start, end, strict=True))
    return "#" + "".join(f"{channel:02x}" for channel in rgb)


def probability_color(probability: float, lower: float, upper: float) -> str:
    """Color for ``probability`` scaled over the observed ``[lower, upper]`` range.

    A degenerate range (all locations equal) maps to the middle of the ramp.
    """
    if upper <= lower:
        return interpolate_color(0.5)
    return interpolate_color((probability - lower) / (upper - lower))


def legend_entries(lower: float, upper: float, bins: int = 5) -> list[LegendEntry]:
    """Evenly spaced legend swatches from ``lower`` to ``upper``, labelled in percent."""
    if upper <= lower:
        return [LegendEntry(label=f"{lower * 100:.0f}%", color=interpolate_color(0.5))]
    step = (upper - lower) / (bins - 1)
    values = [lower + step * i for i in range(bins)]
    return [
        LegendEntry(label=f"{v * 100:.0f}%", color=probability_color(v, lower, upper))
        for v in values
    ]

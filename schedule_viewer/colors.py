"""
Deterministic bar colors for the timeline.

Keys in the current legend get evenly spaced hues from a palette; any other
key falls back to a hue derived from a fixed FNV-1a hash, so the same string
gets the same color on every render and in every process.
"""

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass

from .models import UNASSIGNED
from .temporal import round_half_up

# Palette colors (legend-backed)
PALETTE_SATURATION = 70
PALETTE_LIGHTNESS = 45

# Hash fallback colors
HASH_SATURATION = 65
HASH_LIGHTNESS = 45

# Second gradient stop: hue shift, saturation drop with floor, fixed darker lightness
SECOND_STOP_HUE_SHIFT = 25
SECOND_STOP_SATURATION_DROP = 10
PALETTE_SECOND_STOP_MIN_SATURATION = 55
HASH_SECOND_STOP_MIN_SATURATION = 50
SECOND_STOP_LIGHTNESS = 35

# 32-bit FNV-1a parameters
FNV_OFFSET_BASIS = 2166136261
FNV_PRIME = 16777619


@dataclass(frozen=True)
class ColorGradient:
    """Two-stop horizontal gradient, each stop an HSL color."""

    hue: int
    saturation: int
    lightness: int
    end_hue: int
    end_saturation: int
    end_lightness: int

    @property
    def start_css(self) -> str:
        return f"hsl({self.hue}deg {self.saturation}% {self.lightness}%)"

    @property
    def end_css(self) -> str:
        return f"hsl({self.end_hue}deg {self.end_saturation}% {self.end_lightness}%)"

    @property
    def css(self) -> str:
        return f"linear-gradient(90deg, {self.start_css} 0%, {self.end_css} 100%)"


def _gradient(hue: int, saturation: int, lightness: int, min_end_saturation: int) -> ColorGradient:
    return ColorGradient(
        hue=hue,
        saturation=saturation,
        lightness=lightness,
        end_hue=(hue + SECOND_STOP_HUE_SHIFT) % 360,
        end_saturation=max(min_end_saturation, saturation - SECOND_STOP_SATURATION_DROP),
        end_lightness=SECOND_STOP_LIGHTNESS,
    )


def normalize_key(key: object) -> str:
    """Missing and empty keys all share the unassigned color."""
    if key is None:
        return UNASSIGNED
    text = str(key)
    return text if text else UNASSIGNED


def fnv1a_32(text: str) -> int:
    """32-bit FNV-1a hash of the UTF-8 encoding of text."""
    h = FNV_OFFSET_BASIS
    for byte in text.encode("utf-8"):
        h ^= byte
        h = (h * FNV_PRIME) & 0xFFFFFFFF
    return h


def hash_color(key: object) -> ColorGradient:
    """Fallback color for keys outside the legend."""
    hue = fnv1a_32(normalize_key(key)) % 360
    return _gradient(hue, HASH_SATURATION, HASH_LIGHTNESS, HASH_SECOND_STOP_MIN_SATURATION)


def legend_keys(keys: Iterable[object]) -> list[str]:
    """Normalize keys and drop duplicates, keeping first occurrences in order."""
    seen: dict[str, None] = {}
    for key in keys:
        seen.setdefault(normalize_key(key), None)
    return list(seen)


def assign_palette(keys: Sequence[object]) -> dict[str, ColorGradient]:
    """
    Give each legend key a maximally separated hue.

    Key i of n gets hue round(360 * i / n), so five keys land on
    0, 72, 144, 216 and 288 degrees.
    """
    ordered = legend_keys(keys)
    n = max(1, len(ordered))
    palette: dict[str, ColorGradient] = {}
    for i, key in enumerate(ordered):
        hue = round_half_up(360 * i / n)
        palette[key] = _gradient(
            hue, PALETTE_SATURATION, PALETTE_LIGHTNESS, PALETTE_SECOND_STOP_MIN_SATURATION
        )
    return palette


def color_for(key: object, legend: Mapping[str, ColorGradient]) -> ColorGradient:
    """Legend color for key if it has one, hash color otherwise."""
    normalized = normalize_key(key)
    palette_color = legend.get(normalized)
    if palette_color is not None:
        return palette_color
    return hash_color(normalized)

"""Per-channel pixel arithmetic: clamping and weighted blending."""

from __future__ import annotations

import math
from dataclasses import dataclass

from glyphfit.types import Channel, PixelValue


@dataclass(frozen=True)
class Subpixel:
    """
    Numeric description of a single pixel channel.

    Blending is done in floating point; ``clamp`` converts the result back
    into the channel's valid range (rounding first for integer channels).

    Attributes:
        minimum: Smallest representable channel value.
        maximum: Largest representable channel value.
        integral: True for integer channels (8/16/32-bit), False for float.
    """

    minimum: float
    maximum: float
    integral: bool = True

    def clamp(self, value: float) -> Channel:
        if self.integral:
            value = math.floor(value + 0.5)
        if value < self.minimum:
            value = self.minimum
        elif value > self.maximum:
            value = self.maximum
        return int(value) if self.integral else float(value)


U8 = Subpixel(0, 255)
U16 = Subpixel(0, 65535)
I32 = Subpixel(-(2**31), 2**31 - 1)
F32 = Subpixel(float("-inf"), float("inf"), integral=False)

# Pillow image modes and the channel type each band is stored as
_SUBPIXEL_BY_MODE: dict[str, Subpixel] = {
    "L": U8,
    "LA": U8,
    "La": U8,
    "RGB": U8,
    "RGBA": U8,
    "RGBa": U8,
    "RGBX": U8,
    "CMYK": U8,
    "YCbCr": U8,
    "LAB": U8,
    "HSV": U8,
    "I": I32,
    "F": F32,
}


def subpixel_for_mode(mode: str) -> Subpixel:
    """
    Look up the channel description for a Pillow image mode.

    Args:
        mode: Pillow mode string (e.g., "RGB", "L", "F", "I;16").

    Returns:
        Subpixel describing each band of the mode.

    Raises:
        ValueError: If the mode is not supported for blending.
    """
    if mode.startswith("I;16"):
        return U16
    try:
        return _SUBPIXEL_BY_MODE[mode]
    except KeyError:
        raise ValueError(f"Unsupported image mode for blending: {mode}") from None


def weighted_sum(
    left: PixelValue,
    right: PixelValue,
    left_weight: float,
    right_weight: float,
    subpixel: Subpixel = U8,
) -> PixelValue:
    """
    Combine two pixels channel by channel: ``clamp(l * wl + r * wr)``.

    Both pixels must have the same shape: either both scalars or both tuples
    of equal length.
    """
    if isinstance(left, tuple):
        if not isinstance(right, tuple) or len(left) != len(right):
            raise ValueError(f"Pixel shapes differ: {left!r} vs {right!r}")
        return tuple(
            subpixel.clamp(l * left_weight + r * right_weight)
            for l, r in zip(left, right)
        )
    if isinstance(right, tuple):
        raise ValueError(f"Pixel shapes differ: {left!r} vs {right!r}")
    return subpixel.clamp(left * left_weight + right * right_weight)


def blend(pixel: PixelValue, color: PixelValue, coverage: float, subpixel: Subpixel = U8) -> PixelValue:
    """Linearly interpolate from ``pixel`` toward ``color`` by ``coverage`` in [0, 1]."""
    return weighted_sum(pixel, color, 1.0 - coverage, coverage, subpixel)

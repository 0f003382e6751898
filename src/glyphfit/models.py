"""Data models for glyph layout: points, pixel scales, glyphs and pixel bounds."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Point:
    """A 2D position in floating-point pixel coordinates (y grows downward)."""

    x: float
    y: float

    def __add__(self, other: Point) -> Point:
        return Point(self.x + other.x, self.y + other.y)


@dataclass(frozen=True)
class PxScale:
    """
    Font scaling in pixels on each axis.

    ``y`` is the pixel height of the font (ascent to descent). ``x`` sets the
    horizontal size independently, so ``PxScale(24.8, 12.4)`` draws glyphs
    twice as wide as their natural proportions.
    """

    x: float
    y: float

    @classmethod
    def uniform(cls, size: float) -> PxScale:
        """Scale both axes by the same pixel size."""
        return cls(size, size)


@dataclass(frozen=True)
class Glyph:
    """
    A single character's shape request, prior to rasterization.

    Attributes:
        id: Font-specific glyph identifier (0 is the font's ``.notdef``).
        scale: Pixel scale the glyph is drawn at.
        position: Caret location of the glyph origin on the baseline.
    """

    id: int
    scale: PxScale
    position: Point = field(default_factory=lambda: Point(0.0, 0.0))


@dataclass(frozen=True)
class PixelBounds:
    """Integer pixel rectangle; ``min`` is inclusive, ``max`` exclusive."""

    min: Point
    max: Point

    @property
    def width(self) -> int:
        return int(self.max.x - self.min.x)

    @property
    def height(self) -> int:
        return int(self.max.y - self.min.y)

    def contains(self, x: int, y: int) -> bool:
        """Check whether pixel ``(x, y)`` lies inside the rectangle."""
        return self.min.x <= x < self.max.x and self.min.y <= y < self.max.y

"""Base abstractions for fonts used by layout and rendering."""

from __future__ import annotations

from typing import Callable, Protocol, runtime_checkable

from glyphfit.models import Glyph, PixelBounds, PxScale


class FontLoadError(RuntimeError):
    """Raised when a font file or blob cannot be opened."""


@runtime_checkable
class OutlinedGlyph(Protocol):
    """A rasterized glyph: pixel bounds plus per-pixel coverage in [0, 1]."""

    glyph: Glyph

    def px_bounds(self) -> PixelBounds:
        ...

    def coverage(self, x: int, y: int) -> float:
        ...

    def draw(self, callback: Callable[[int, int, float], None]) -> None:
        ...


@runtime_checkable
class ScaleFont(Protocol):
    """A font view at a fixed pixel scale; all metrics are in pixels."""

    scale: PxScale

    def ascent(self) -> float:
        ...

    def descent(self) -> float:
        ...

    def height(self) -> float:
        ...

    def line_gap(self) -> float:
        ...

    def glyph_id(self, char: str) -> int:
        ...

    def scaled_glyph(self, char: str) -> Glyph:
        ...

    def h_advance(self, glyph_id: int) -> float:
        ...

    def kern(self, first: int, second: int) -> float:
        ...

    def outline_glyph(self, glyph: Glyph) -> OutlinedGlyph | None:
        ...


@runtime_checkable
class Font(Protocol):
    """An unscaled font that can produce scaled views and glyph outlines."""

    def as_scaled(self, scale: PxScale) -> ScaleFont:
        ...

    def outline_glyph(self, glyph: Glyph) -> OutlinedGlyph | None:
        ...

"""Canvas abstraction and its Pillow-backed implementation."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from PIL import Image

from glyphfit.render.pixelops import Subpixel, subpixel_for_mode
from glyphfit.types import BoundsPolicy, PixelValue


class CanvasBoundsError(IndexError):
    """Raised by a strict canvas when a pixel outside the image is accessed."""


@runtime_checkable
class Canvas(Protocol):
    """A bounded 2D pixel store with indexed read and write."""

    width: int
    height: int
    subpixel: Subpixel

    def get_pixel(self, x: int, y: int) -> PixelValue:
        ...

    def draw_pixel(self, x: int, y: int, pixel: PixelValue) -> None:
        ...


class ImageCanvas:
    """
    Canvas over a Pillow image, mutated in place.

    Out-of-range access follows ``bounds``:

    - ``"clip"``: writes outside the image are dropped and reads return the
      mode's zero pixel, so glyphs hanging over an edge are cut off.
    - ``"strict"``: any out-of-range access raises CanvasBoundsError.
    """

    def __init__(self, image: Image.Image, bounds: BoundsPolicy = "clip") -> None:
        """
        Wrap an image for drawing.

        Args:
            image: Pillow image to draw into (modified in place).
            bounds: Out-of-range policy, "clip" (default) or "strict".

        Raises:
            ValueError: If the policy is unknown or the image mode can't be blended.
        """
        if bounds not in ("clip", "strict"):
            raise ValueError(f"Unknown bounds policy: {bounds}")
        self.image = image
        self.bounds = bounds
        self.width, self.height = image.size
        self.subpixel = subpixel_for_mode(image.mode)
        self._pixels = image.load()
        bands = len(image.getbands())
        self._zero: PixelValue = tuple([0] * bands) if bands > 1 else 0
        self.dropped_writes = 0

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def get_pixel(self, x: int, y: int) -> PixelValue:
        if not self.in_bounds(x, y):
            if self.bounds == "strict":
                raise CanvasBoundsError(f"Pixel ({x}, {y}) outside {self.width}x{self.height} canvas")
            return self._zero
        return self._pixels[x, y]

    def draw_pixel(self, x: int, y: int, pixel: PixelValue) -> None:
        if not self.in_bounds(x, y):
            if self.bounds == "strict":
                raise CanvasBoundsError(f"Pixel ({x}, {y}) outside {self.width}x{self.height} canvas")
            self.dropped_writes += 1
            return
        self._pixels[x, y] = pixel


def as_canvas(target: Canvas | Image.Image, bounds: BoundsPolicy = "clip") -> Canvas:
    """Return ``target`` unchanged if it's already a canvas, else wrap the image."""
    if isinstance(target, Image.Image):
        return ImageCanvas(target, bounds=bounds)
    return target

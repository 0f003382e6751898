"""Shared fixtures: an in-memory fake font and a real TrueType font when available."""

from __future__ import annotations

import math
from pathlib import Path
from typing import Callable

import pytest
from PIL import Image, ImageFont

from glyphfit.fonts import TrueTypeFont
from glyphfit.models import Glyph, PixelBounds, Point, PxScale
from glyphfit.render import ImageCanvas

# Common locations of DejaVu Sans, used when Pillow has no bundled TrueType font
SYSTEM_FONT_PATHS = [
    Path("/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf"),
    Path("/usr/share/fonts/dejavu/DejaVuSans.ttf"),
    Path("/usr/share/fonts/TTF/DejaVuSans.ttf"),
    Path("/Library/Fonts/Arial.ttf"),
]


class FakeOutline:
    """Rectangular coverage mask with the same coverage everywhere."""

    def __init__(self, glyph: Glyph, bounds: PixelBounds, value: float) -> None:
        self.glyph = glyph
        self._bounds = bounds
        self._value = value

    def px_bounds(self) -> PixelBounds:
        return self._bounds

    def coverage(self, x: int, y: int) -> float:
        return self._value

    def draw(self, callback: Callable[[int, int, float], None]) -> None:
        for y in range(self._bounds.height):
            for x in range(self._bounds.width):
                callback(x, y, self._value)


class FakeFont:
    """
    Font with simple unit metrics (height 1.0 em), so pixel values equal the scale.

    Ascent 0.8, descent -0.2, line gap 0.1; every glyph advances 0.5 except
    "W" (0.9); "AV" kerns by -0.1. Ink is a box 0.4 wide and ascent tall,
    whitespace has no ink.
    """

    ascender = 0.8
    descender = -0.2
    gap = 0.1
    kerning = {("A", "V"): -0.1}

    def __init__(self, coverage: float = 1.0) -> None:
        self.coverage_value = coverage
        self.outline_requests: list[Glyph] = []

    def as_scaled(self, scale: PxScale) -> FakeScaledFont:
        return FakeScaledFont(self, scale)

    @staticmethod
    def advance(glyph_id: int) -> float:
        return 0.9 if chr(glyph_id) == "W" else 0.5

    def outline_glyph(self, glyph: Glyph) -> FakeOutline | None:
        self.outline_requests.append(glyph)
        if chr(glyph.id).isspace():
            return None
        left = math.floor(glyph.position.x)
        bottom = math.floor(glyph.position.y)
        width = max(1, int(glyph.scale.x * 0.4))
        height = max(1, int(glyph.scale.y * self.ascender))
        bounds = PixelBounds(Point(left, bottom - height), Point(left + width, bottom))
        return FakeOutline(glyph, bounds, self.coverage_value)


class FakeScaledFont:
    def __init__(self, font: FakeFont, scale: PxScale) -> None:
        self.font = font
        self.scale = scale

    def ascent(self) -> float:
        return self.font.ascender * self.scale.y

    def descent(self) -> float:
        return self.font.descender * self.scale.y

    def height(self) -> float:
        return self.ascent() - self.descent()

    def line_gap(self) -> float:
        return self.font.gap * self.scale.y

    def glyph_id(self, char: str) -> int:
        return ord(char)

    def scaled_glyph(self, char: str) -> Glyph:
        return Glyph(self.glyph_id(char), self.scale)

    def h_advance(self, glyph_id: int) -> float:
        return self.font.advance(glyph_id) * self.scale.x

    def kern(self, first: int, second: int) -> float:
        return self.font.kerning.get((chr(first), chr(second)), 0.0) * self.scale.x

    def outline_glyph(self, glyph: Glyph) -> FakeOutline | None:
        return self.font.outline_glyph(glyph)


class RecordingCanvas:
    """Canvas over a Pillow image that records every pixel write."""

    def __init__(self, image: Image.Image) -> None:
        self._inner = ImageCanvas(image)
        self.width = self._inner.width
        self.height = self._inner.height
        self.subpixel = self._inner.subpixel
        self.writes: list[tuple[int, int]] = []

    def get_pixel(self, x, y):
        return self._inner.get_pixel(x, y)

    def draw_pixel(self, x, y, pixel) -> None:
        self.writes.append((x, y))
        self._inner.draw_pixel(x, y, pixel)


@pytest.fixture
def fake_font() -> FakeFont:
    return FakeFont()


@pytest.fixture
def make_fake_font() -> type[FakeFont]:
    return FakeFont


@pytest.fixture
def make_recording_canvas() -> type[RecordingCanvas]:
    return RecordingCanvas


@pytest.fixture(scope="session")
def truetype_font_bytes() -> bytes:
    """TrueType data from Pillow's bundled default font or a system font."""
    try:
        default = ImageFont.load_default(size=12)
    except (TypeError, ImportError, OSError):
        default = None
    data = getattr(default, "font_bytes", None)
    if data:
        return data

    for path in SYSTEM_FONT_PATHS:
        if path.is_file():
            return path.read_bytes()
    pytest.skip("No TrueType font available")


@pytest.fixture(scope="session")
def truetype_font_path(tmp_path_factory, truetype_font_bytes) -> Path:
    path = tmp_path_factory.mktemp("fonts") / "test-font.ttf"
    path.write_bytes(truetype_font_bytes)
    return path


@pytest.fixture
def truetype_font(truetype_font_bytes) -> TrueTypeFont:
    return TrueTypeFont.from_bytes(truetype_font_bytes, name="test-font.ttf")

"""TrueType/OpenType fonts: HarfBuzz for metrics and kerning, FreeType for rasterization."""

from __future__ import annotations

import io
import logging
import math
from pathlib import Path
from typing import Callable

import freetype
import uharfbuzz as hb

from glyphfit.fonts.base import FontLoadError
from glyphfit.models import Glyph, PixelBounds, Point, PxScale

logger = logging.getLogger(__name__)

# Features enabled when measuring pair kerning: kerning only, no substitutions
# that could change the glyph ids being measured.
_KERN_ONLY_FEATURES = {"kern": True, "liga": False, "clig": False, "calt": False, "dlig": False}

# FreeType 16.16 identity matrix
_IDENTITY = (0x10000, 0, 0, 0x10000)


class GlyphRaster:
    """
    Anti-aliased coverage mask of one glyph.

    Coverage is stored as the 8-bit gray bitmap FreeType renders, row by row
    with ``pitch`` bytes per row, and exposed as floats in [0, 1].
    """

    def __init__(self, glyph: Glyph, bounds: PixelBounds, buffer: bytes, pitch: int) -> None:
        self.glyph = glyph
        self._bounds = bounds
        self._buffer = buffer
        self._pitch = pitch

    def px_bounds(self) -> PixelBounds:
        return self._bounds

    def coverage(self, x: int, y: int) -> float:
        return self._buffer[y * self._pitch + x] / 255.0

    def draw(self, callback: Callable[[int, int, float], None]) -> None:
        """Call ``callback(x, y, v)`` for every pixel of the mask, in row order."""
        width = self._bounds.width
        for y in range(self._bounds.height):
            row = y * self._pitch
            for x in range(width):
                callback(x, y, self._buffer[row + x] / 255.0)


class TrueTypeFont:
    """
    A font loaded from TrueType/OpenType data.

    HarfBuzz (at the font's native units-per-em) provides glyph lookup,
    advances, font extents and pair kerning. FreeType renders outlines at the
    glyph's pixel scale, with the fractional part of the glyph position applied
    as a sub-pixel offset.
    """

    def __init__(self, data: bytes, name: str = "<memory>", index: int = 0) -> None:
        """
        Load a font from raw bytes.

        Args:
            data: TrueType/OpenType font file contents.
            name: Display name for logs and errors.
            index: Face index inside a font collection.

        Raises:
            FontLoadError: If HarfBuzz or FreeType can't parse the data.
        """
        self.name = name
        self._hb_face = hb.Face(hb.Blob(data), index)
        if self._hb_face.glyph_count == 0:
            raise FontLoadError(f"No glyphs found in font {name}")
        self._hb_font = hb.Font(self._hb_face)
        hb.ot_font_set_funcs(self._hb_font)

        try:
            self._ft_face = freetype.Face(io.BytesIO(data), index)
        except freetype.FT_Exception as e:
            raise FontLoadError(f"FreeType failed to open font {name}: {e}") from e

        extents = self._hb_font.get_font_extents("ltr")
        self.units_per_em = self._hb_face.upem
        self.ascender = float(extents.ascender)
        self.descender = float(extents.descender)
        self.line_gap = float(extents.line_gap)
        # Pixel scales are relative to the ascent-to-descent height
        self.height_unscaled = self.ascender - self.descender
        if self.height_unscaled <= 0:
            raise FontLoadError(f"Font {name} has no vertical extent")

        self._chars_by_glyph: dict[int, str] = {}
        self._kerning: dict[tuple[int, int], float] = {}
        logger.info(f"Loaded font {name}: {self._hb_face.glyph_count} glyphs, {self.units_per_em} units/em")

    @classmethod
    def from_path(cls, path: Path | str, index: int = 0) -> TrueTypeFont:
        """
        Load a font file from disk.

        Raises:
            FontLoadError: If the file can't be read or parsed.
        """
        path = Path(path)
        try:
            data = path.read_bytes()
        except OSError as e:
            raise FontLoadError(f"Failed to read font file {path}: {e}") from e
        return cls(data, name=path.name, index=index)

    @classmethod
    def from_bytes(cls, data: bytes, name: str = "<memory>", index: int = 0) -> TrueTypeFont:
        return cls(data, name=name, index=index)

    def as_scaled(self, scale: PxScale) -> ScaledTrueTypeFont:
        return ScaledTrueTypeFont(self, scale)

    # --- Unscaled metrics (font units) ---

    def glyph_id(self, char: str) -> int:
        """Glyph id for a character, 0 (.notdef) when the font doesn't cover it."""
        gid = self._hb_font.get_nominal_glyph(ord(char))
        if not gid:
            return 0
        self._chars_by_glyph.setdefault(gid, char)
        return gid

    def h_advance_unscaled(self, glyph_id: int) -> float:
        return float(self._hb_font.get_glyph_h_advance(glyph_id))

    def kern_unscaled(self, first: int, second: int) -> float:
        """
        Pair kerning in font units between two glyphs seen by ``glyph_id``.

        Measured by shaping the two characters with only kerning enabled and
        comparing the first glyph's shaped advance with its nominal advance,
        so both legacy ``kern`` tables and GPOS pair adjustments are honoured.
        """
        key = (first, second)
        if key in self._kerning:
            return self._kerning[key]

        kerning = 0.0
        left = self._chars_by_glyph.get(first)
        right = self._chars_by_glyph.get(second)
        if left is not None and right is not None:
            buf = hb.Buffer()
            buf.add_str(left + right)
            buf.guess_segment_properties()
            hb.shape(self._hb_font, buf, _KERN_ONLY_FEATURES)
            infos = buf.glyph_infos
            positions = buf.glyph_positions
            if [info.codepoint for info in infos] == [first, second]:
                kerning = float(positions[0].x_advance - self._hb_font.get_glyph_h_advance(first))
            else:
                logger.debug(f"Shaping changed glyphs for pair {left!r}{right!r}, no kerning applied")

        logger.debug(f"Kerning cache miss for glyphs {first}, {second}: {kerning} units")
        self._kerning[key] = kerning
        return kerning

    # --- Rasterization ---

    def outline_glyph(self, glyph: Glyph) -> GlyphRaster | None:
        """
        Rasterize a positioned glyph at its own scale.

        Returns:
            The coverage mask, or None when the glyph has no ink (spaces,
            empty outlines) or FreeType can't load it.
        """
        h_ppem = glyph.scale.x * self.units_per_em / self.height_unscaled
        v_ppem = glyph.scale.y * self.units_per_em / self.height_unscaled
        if h_ppem <= 0 or v_ppem <= 0:
            return None

        origin_x = math.floor(glyph.position.x)
        origin_y = math.floor(glyph.position.y)
        # FreeType's y axis points up, the canvas's points down
        delta = freetype.FT_Vector(
            round((glyph.position.x - origin_x) * 64),
            -round((glyph.position.y - origin_y) * 64),
        )

        face = self._ft_face
        try:
            face.set_char_size(
                width=max(1, round(h_ppem * 64)),
                height=max(1, round(v_ppem * 64)),
                hres=72,
                vres=72,
            )
            face.set_transform(freetype.FT_Matrix(*_IDENTITY), delta)
            face.load_glyph(
                glyph.id,
                freetype.FT_LOAD_RENDER | freetype.FT_LOAD_NO_HINTING | freetype.FT_LOAD_NO_BITMAP,
            )
        except freetype.FT_Exception as e:
            logger.debug(f"FreeType could not render glyph {glyph.id} of {self.name}: {e}")
            return None

        slot = face.glyph
        bitmap = slot.bitmap
        if bitmap.width == 0 or bitmap.rows == 0:
            return None

        min_point = Point(origin_x + slot.bitmap_left, origin_y - slot.bitmap_top)
        bounds = PixelBounds(min_point, Point(min_point.x + bitmap.width, min_point.y + bitmap.rows))
        return GlyphRaster(glyph, bounds, bytes(bitmap.buffer), abs(bitmap.pitch))


class ScaledTrueTypeFont:
    """A TrueTypeFont viewed at a fixed pixel scale."""

    def __init__(self, font: TrueTypeFont, scale: PxScale) -> None:
        self.font = font
        self.scale = scale
        self.h_scale_factor = scale.x / font.height_unscaled
        self.v_scale_factor = scale.y / font.height_unscaled

    def ascent(self) -> float:
        return self.font.ascender * self.v_scale_factor

    def descent(self) -> float:
        return self.font.descender * self.v_scale_factor

    def height(self) -> float:
        return self.ascent() - self.descent()

    def line_gap(self) -> float:
        return self.font.line_gap * self.v_scale_factor

    def glyph_id(self, char: str) -> int:
        return self.font.glyph_id(char)

    def scaled_glyph(self, char: str) -> Glyph:
        return Glyph(self.glyph_id(char), self.scale)

    def h_advance(self, glyph_id: int) -> float:
        return self.font.h_advance_unscaled(glyph_id) * self.h_scale_factor

    def kern(self, first: int, second: int) -> float:
        return self.font.kern_unscaled(first, second) * self.h_scale_factor

    def outline_glyph(self, glyph: Glyph) -> GlyphRaster | None:
        return self.font.outline_glyph(glyph)

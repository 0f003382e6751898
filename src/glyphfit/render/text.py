"""Paragraph layout, shrink-to-fit and glyph blending onto canvases."""

from __future__ import annotations

import logging
import math
import unicodedata
from dataclasses import dataclass, replace
from typing import Iterator, Sequence

from PIL import Image

from glyphfit.fonts.base import Font, OutlinedGlyph, ScaleFont
from glyphfit.models import Glyph, Point, PxScale
from glyphfit.render.canvas import Canvas, ImageCanvas, as_canvas
from glyphfit.render.pixelops import weighted_sum
from glyphfit.types import BoundsPolicy, PixelValue

logger = logging.getLogger(__name__)


class EmptyRenderableText(ValueError):
    """Raised when text lays out to no glyphs, so there's no width to measure."""


@dataclass
class FittedLayout:
    """
    Result of laying out text against a maximum width.

    Attributes:
        glyphs: Final positioned glyphs.
        scale: Scale the glyphs were laid out at (narrower than requested if shrunk).
        natural_width: Width of the layout at the requested scale.
        shrunk: True if a second, horizontally compressed layout was made.
    """

    glyphs: list[Glyph]
    scale: PxScale
    natural_width: float
    shrunk: bool = False

    @property
    def width(self) -> float:
        return text_width(self.glyphs)


def _is_control(char: str) -> bool:
    return unicodedata.category(char) == "Cc"


def iter_paragraph(font: ScaleFont, position: Point, text: str) -> Iterator[Glyph]:
    """
    Lay out ``text`` left to right, yielding positioned glyphs.

    The caret starts at ``position`` moved down by the font's ascent, so glyph
    positions sit on the first baseline. Kerning is applied between
    consecutive glyphs on a line. ``\\n`` returns the caret to ``position.x``
    and moves it down by ``height + line_gap``; other control characters are
    skipped without advancing.
    """
    v_advance = font.height() + font.line_gap()
    caret_x = position.x
    caret_y = position.y + font.ascent()
    previous: Glyph | None = None

    for char in text:
        if _is_control(char):
            if char == "\n":
                caret_x = position.x
                caret_y += v_advance
                previous = None
            continue

        glyph = font.scaled_glyph(char)
        if previous is not None:
            caret_x += font.kern(previous.id, glyph.id)
        glyph = replace(glyph, position=Point(caret_x, caret_y))

        previous = glyph
        caret_x += font.h_advance(glyph.id)
        yield glyph


def layout_paragraph(
    font: ScaleFont, position: Point, text: str, target: list[Glyph] | None = None
) -> list[Glyph]:
    """
    Simple paragraph layout of ``text`` into a list of glyphs.

    Args:
        font: Font at the scale to lay out with.
        position: Top-left corner of the first line.
        text: Text to lay out; ``\\n`` starts a new line.
        target: List to append to. It is not cleared first.

    Returns:
        ``target`` (or a new list when omitted) with the glyphs appended.
    """
    if target is None:
        target = []
    target.extend(iter_paragraph(font, position, text))
    return target


def text_width(glyphs: Sequence[Glyph]) -> float:
    """
    Rendered width of a layout: the right edge of the last glyph's layout box.

    This is ``position.x + scale.x`` of the last glyph, not the ink extent.

    Raises:
        EmptyRenderableText: If there are no glyphs.
    """
    if not glyphs:
        raise EmptyRenderableText("Text contains no renderable characters")
    last = glyphs[-1]
    return last.position.x + last.scale.x


def fit_scale(scale: PxScale, actual_width: float, max_width: float) -> PxScale:
    """
    Compress ``scale`` horizontally so a layout of ``actual_width`` fits ``max_width``.

    Only ``x`` changes; glyphs get narrower but keep their height.

    Raises:
        ValueError: If ``max_width`` isn't positive.
    """
    if actual_width <= max_width:
        return scale
    if max_width <= 0:
        raise ValueError(f"max_width must be positive, got {max_width}")
    shrink_factor = actual_width / max_width
    return PxScale(scale.x / shrink_factor, scale.y)


def layout_fitted(font: Font, position: Point, scale: PxScale, max_width: float, text: str) -> FittedLayout:
    """
    Lay out text, re-laying it out once at a narrower scale if it's too wide.

    There is a single correction pass: if the compressed layout still
    overflows (e.g. because the text doesn't start at x=0) it is kept anyway.

    Raises:
        EmptyRenderableText: If the text has no renderable characters.
    """
    glyphs = layout_paragraph(font.as_scaled(scale), position, text)
    natural_width = text_width(glyphs)
    logger.debug(f"Laid out {len(glyphs)} glyphs, width {natural_width:.2f}px at scale {scale}")

    if natural_width <= max_width:
        return FittedLayout(glyphs, scale, natural_width)

    new_scale = fit_scale(scale, natural_width, max_width)
    logger.info(
        f"Text width {natural_width:.2f}px exceeds {max_width}px, "
        f"shrinking horizontal scale {scale.x:.3f} -> {new_scale.x:.3f}"
    )
    glyphs = layout_paragraph(font.as_scaled(new_scale), position, text)

    width = text_width(glyphs)
    if width > max_width and not math.isclose(width, max_width, rel_tol=1e-6):
        logger.warning(f"Text still {width:.2f}px wide after shrinking to fit {max_width}px")

    return FittedLayout(glyphs, new_scale, natural_width, shrunk=True)


def _blend_outline(canvas: Canvas, outlined: OutlinedGlyph, color: PixelValue) -> None:
    bounds = outlined.px_bounds()
    min_x = int(bounds.min.x)
    min_y = int(bounds.min.y)
    subpixel = canvas.subpixel

    def blend_sample(x: int, y: int, v: float) -> None:
        pixel_x = x + min_x
        pixel_y = y + min_y
        pixel = canvas.get_pixel(pixel_x, pixel_y)
        canvas.draw_pixel(pixel_x, pixel_y, weighted_sum(pixel, color, 1.0 - v, v, subpixel))

    outlined.draw(blend_sample)


def draw_text_mut(
    canvas: Canvas | Image.Image,
    color: PixelValue,
    x: float,
    y: float,
    scale: PxScale,
    max_width: float,
    font: Font,
    text: str,
    bounds: BoundsPolicy = "clip",
) -> None:
    """
    Draw colored text onto a canvas in place.

    The text is laid out with its top-left corner at ``(x, y)``; if it's wider
    than ``max_width`` it is re-laid out once with a horizontally compressed
    scale. Each glyph's coverage is then blended into the canvas by straight
    linear interpolation toward ``color``.

    Args:
        canvas: Canvas, or a Pillow image (wrapped with ``bounds`` policy).
        color: Pixel value in the canvas's format (e.g. ``(0, 0, 255)`` for RGB).
        x: Left edge of the text in pixels.
        y: Top edge of the text in pixels.
        scale: Pixel scale; ``x`` may differ from ``y``.
        max_width: Maximum rendered width in pixels.
        font: Font to lay out and rasterize with.
        text: Text to draw; ``\\n`` starts a new line.
        bounds: Out-of-range policy used when ``canvas`` is a Pillow image.

    Raises:
        EmptyRenderableText: If the text has no renderable characters. The
            canvas is left untouched.
    """
    canvas = as_canvas(canvas, bounds=bounds)
    layout = layout_fitted(font, Point(float(x), float(y)), scale, max_width, text)

    for glyph in layout.glyphs:
        outlined = font.outline_glyph(glyph)
        if outlined is None:
            logger.debug(f"Glyph {glyph.id} at {glyph.position} has no outline, skipped")
            continue
        _blend_outline(canvas, outlined, color)


def draw_text(
    image: Image.Image,
    color: PixelValue,
    x: float,
    y: float,
    scale: PxScale,
    max_width: float,
    font: Font,
    text: str,
    bounds: BoundsPolicy = "clip",
) -> Image.Image:
    """
    Draw colored text onto a copy of ``image``.

    Same arguments as ``draw_text_mut``. The input image is not modified.

    Returns:
        New image of the same size and mode with the text drawn.
    """
    out = image.copy()
    draw_text_mut(ImageCanvas(out, bounds=bounds), color, x, y, scale, max_width, font, text)
    return out

"""Rendering modules: canvas access, pixel blending and text drawing."""

from glyphfit.render.canvas import Canvas, CanvasBoundsError, ImageCanvas, as_canvas
from glyphfit.render.pixelops import Subpixel, blend, subpixel_for_mode, weighted_sum
from glyphfit.render.text import (
    EmptyRenderableText,
    FittedLayout,
    draw_text,
    draw_text_mut,
    fit_scale,
    iter_paragraph,
    layout_fitted,
    layout_paragraph,
    text_width,
)

__all__ = [
    "Canvas",
    "CanvasBoundsError",
    "EmptyRenderableText",
    "FittedLayout",
    "ImageCanvas",
    "Subpixel",
    "as_canvas",
    "blend",
    "draw_text",
    "draw_text_mut",
    "fit_scale",
    "iter_paragraph",
    "layout_fitted",
    "layout_paragraph",
    "subpixel_for_mode",
    "text_width",
    "weighted_sum",
]

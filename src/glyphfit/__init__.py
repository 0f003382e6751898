"""Single-line text layout with shrink-to-fit, drawn onto raster images."""

__version__ = "0.1.0"

# High-level Python API
from glyphfit.config import Config, load_config
from glyphfit.fonts import Font, FontLoadError, ScaleFont, TrueTypeFont, load_font
from glyphfit.models import Glyph, PixelBounds, Point, PxScale
from glyphfit.render import (
    CanvasBoundsError,
    EmptyRenderableText,
    FittedLayout,
    ImageCanvas,
    draw_text,
    draw_text_mut,
    fit_scale,
    layout_fitted,
    layout_paragraph,
    text_width,
)

__all__ = [
    "CanvasBoundsError",
    "Config",
    "EmptyRenderableText",
    "FittedLayout",
    "Font",
    "FontLoadError",
    "Glyph",
    "ImageCanvas",
    "PixelBounds",
    "Point",
    "PxScale",
    "ScaleFont",
    "TrueTypeFont",
    "draw_text",
    "draw_text_mut",
    "fit_scale",
    "layout_fitted",
    "layout_paragraph",
    "load_config",
    "load_font",
    "text_width",
]

"""Font protocols, TrueType loading and font spec resolution."""

import logging
from pathlib import Path
from typing import Optional

from glyphfit.fonts.base import Font, FontLoadError, OutlinedGlyph, ScaleFont
from glyphfit.fonts.google import get_google_font
from glyphfit.fonts.truetype import GlyphRaster, ScaledTrueTypeFont, TrueTypeFont

logger = logging.getLogger(__name__)


def parse_font_spec(font_spec: str) -> tuple[str, Optional[int]]:
    """
    Split a ``family:weight`` spec into its parts.

    Examples:
        "Roboto:700" → ("Roboto", 700)
        "Roboto" → ("Roboto", None)

    Raises:
        ValueError: If the weight part isn't an integer.
    """
    if ":" not in font_spec:
        return font_spec.strip(), None
    family, weight_str = font_spec.rsplit(":", 1)
    try:
        weight = int(weight_str.strip())
    except ValueError:
        raise ValueError(f"Invalid font weight '{weight_str}' in '{font_spec}'") from None
    return family.strip(), weight


def resolve_font_path(font_spec: str, cache_dir: Path | None = None) -> Optional[Path]:
    """
    Resolve a font specification to a font file on disk.

    Resolution priority:
    1. An existing file path is returned as is
    2. A ``family:weight`` spec is downloaded from Google Fonts (cached)

    Args:
        font_spec: File path, or Google Fonts family with weight ("Orbitron:700").
        cache_dir: Override for the Google Fonts cache directory.

    Returns:
        Path to the font file, or None for a font file that doesn't exist.

    Raises:
        FontLoadError: If a Google Fonts download fails.
    """
    path = Path(font_spec).expanduser()
    if path.is_file():
        logger.debug(f"Font '{font_spec}' found on disk")
        return path

    # A missing font file is never a Google Fonts spec, even with a drive letter
    if ":" not in font_spec or path.suffix.lower() in (".ttf", ".otf", ".ttc"):
        logger.warning(f"Font file not found: {font_spec}")
        return None

    family, weight = parse_font_spec(font_spec)
    logger.info(f"Font '{font_spec}' not found locally, trying Google Fonts...")
    return get_google_font(family, weight or 400, cache_dir=cache_dir)


def load_font(font_spec: str, cache_dir: Path | None = None) -> TrueTypeFont:
    """
    Resolve and load a font.

    Raises:
        FontLoadError: If the spec can't be resolved or the file can't be parsed.
    """
    path = resolve_font_path(font_spec, cache_dir=cache_dir)
    if path is None:
        raise FontLoadError(f"Could not resolve font: {font_spec}")
    return TrueTypeFont.from_path(path)


__all__ = [
    "Font",
    "FontLoadError",
    "GlyphRaster",
    "OutlinedGlyph",
    "ScaleFont",
    "ScaledTrueTypeFont",
    "TrueTypeFont",
    "load_font",
    "parse_font_spec",
    "resolve_font_path",
]

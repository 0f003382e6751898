"""Fetch TrueType files from Google Fonts into a local cache."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path

import requests

from glyphfit.fonts.base import FontLoadError

logger = logging.getLogger(__name__)

DEFAULT_CACHE_DIR = Path.home() / ".cache" / "glyphfit" / "fonts"

CSS_ENDPOINT = "https://fonts.googleapis.com/css"

# Leading bytes of files FreeType and HarfBuzz can both open
SFNT_SIGNATURES = (b"\x00\x01\x00\x00", b"true", b"OTTO", b"ttcf")

_FACE_BLOCK = re.compile(r"@font-face\s*\{([^}]*)\}", re.DOTALL)
_FACE_WEIGHT = re.compile(r"font-weight:\s*(\d+)")
_FACE_SRC = re.compile(r"url\(\s*['\"]?(https://[^)'\"]+)['\"]?\s*\)(?:\s*format\(\s*['\"]?([\w-]+))?")


@dataclass(frozen=True)
class FontFace:
    """One ``@font-face`` rule served by the CSS endpoint."""

    weight: int
    url: str
    format: str | None = None

    @property
    def is_truetype(self) -> bool:
        if self.format is not None:
            return self.format in ("truetype", "opentype")
        return self.url.endswith((".ttf", ".otf"))


def parse_font_faces(css: str) -> list[FontFace]:
    """Collect every ``@font-face`` rule that names a weight and a source URL."""
    faces = []
    for block in _FACE_BLOCK.findall(css):
        weight = _FACE_WEIGHT.search(block)
        src = _FACE_SRC.search(block)
        if weight and src:
            faces.append(FontFace(int(weight.group(1)), src.group(1), src.group(2)))
    return faces


def pick_face(faces: list[FontFace], weight: int) -> FontFace | None:
    """The TrueType face whose weight is closest to ``weight``."""
    candidates = [face for face in faces if face.is_truetype]
    if not candidates:
        return None
    return min(candidates, key=lambda face: abs(face.weight - weight))


class GoogleFontCache:
    """
    Download-once store of Google Fonts, keyed by family and weight.

    Files are only written to the cache after their header has been checked,
    so a cached file is always something ``TrueTypeFont`` can try to open.
    """

    CSS_TIMEOUT = 10
    FONT_TIMEOUT = 30

    def __init__(self, cache_dir: Path | None = None, session: requests.Session | None = None) -> None:
        self.cache_dir = Path(cache_dir) if cache_dir is not None else DEFAULT_CACHE_DIR
        self.session = session or requests.Session()

    def path_for(self, family: str, weight: int) -> Path:
        return self.cache_dir / f"{family.replace(' ', '')}-{weight}.ttf"

    def fetch(self, family: str, weight: int = 400) -> Path:
        """
        Return the cached file for ``family`` at ``weight``, downloading it on a miss.

        Raises:
            FontLoadError: If the family isn't served, no TrueType source is
                offered, the download fails, or the payload isn't a font.
        """
        target = self.path_for(family, weight)
        if target.is_file():
            logger.debug(f"Google font cache hit: {target}")
            return target

        face = self._lookup(family, weight)
        if face.weight != weight:
            logger.warning(f"{family} has no weight {weight}, using {face.weight}")

        data = self._get(face.url, self.FONT_TIMEOUT, f"{family} {face.weight}").content
        if not data.startswith(SFNT_SIGNATURES):
            raise FontLoadError(f"Download for {family} {face.weight} is not a TrueType/OpenType file")

        self.cache_dir.mkdir(parents=True, exist_ok=True)
        partial = target.with_suffix(".part")
        partial.write_bytes(data)
        partial.replace(target)
        logger.info(f"Cached {family} {face.weight} ({len(data)} bytes) at {target}")
        return target

    def _lookup(self, family: str, weight: int) -> FontFace:
        params = {"family": f"{family}:{weight}"}
        css = self._get(CSS_ENDPOINT, self.CSS_TIMEOUT, family, params=params).text
        face = pick_face(parse_font_faces(css), weight)
        if face is None:
            raise FontLoadError(f"Google Fonts offers no TrueType file for {family}")
        return face

    def _get(self, url: str, timeout: int, what: str, **kwargs) -> requests.Response:
        try:
            response = self.session.get(url, timeout=timeout, **kwargs)
            response.raise_for_status()
        except requests.RequestException as e:
            logger.warning(f"Google Fonts request for {what} failed: {e}")
            raise FontLoadError(f"Could not download {what} from Google Fonts: {e}") from e
        return response


def get_google_font(family: str, weight: int = 400, cache_dir: Path | None = None) -> Path:
    """Shortcut for ``GoogleFontCache(cache_dir).fetch(family, weight)``."""
    return GoogleFontCache(cache_dir).fetch(family, weight)

#!/usr/bin/env python3
"""Test font spec parsing and resolution (no network access)."""

import pytest
import requests

import glyphfit.fonts as fonts
from glyphfit.fonts import FontLoadError, load_font, parse_font_spec, resolve_font_path
from glyphfit.fonts.google import FontFace, GoogleFontCache, parse_font_faces, pick_face

ORBITRON_400 = "https://fonts.gstatic.com/s/orbitron/v31/yMJMMIlzdpvBhQQL_SC3X9yhF25-T1nyxSmxZw.ttf"
ORBITRON_700 = "https://fonts.gstatic.com/s/orbitron/v31/yMJMMIlzdpvBhQQL_SC3X9yhF25-T1ny_CmxZw.ttf"

SAMPLE_CSS = f"""
@font-face {{
  font-family: 'Orbitron';
  font-style: normal;
  font-weight: 400;
  src: url({ORBITRON_400}) format('truetype');
}}
@font-face {{
  font-family: 'Orbitron';
  font-style: normal;
  font-weight: 700;
  src: url({ORBITRON_700}) format('truetype');
}}
"""

WOFF2_CSS = """
@font-face {
  font-family: 'Orbitron';
  font-weight: 400;
  src: url(https://fonts.gstatic.com/s/orbitron/v31/abc.woff2) format('woff2');
}
"""

FAKE_TTF = b"\x00\x01\x00\x00" + b"\x00" * 60


class FakeResponse:
    def __init__(self, text="", content=b"", status=200):
        self.text = text
        self.content = content
        self.status = status

    def raise_for_status(self):
        if self.status >= 400:
            raise requests.HTTPError(f"{self.status} error")


class FakeSession:
    """Serves canned responses by URL and records every request."""

    def __init__(self, responses):
        self.responses = responses
        self.requests = []

    def get(self, url, timeout=None, **kwargs):
        self.requests.append((url, kwargs.get("params")))
        response = self.responses[url]
        if isinstance(response, Exception):
            raise response
        return response


def _session(css=SAMPLE_CSS, font=FAKE_TTF):
    return FakeSession(
        {
            "https://fonts.googleapis.com/css": FakeResponse(text=css),
            ORBITRON_400: FakeResponse(content=font),
            ORBITRON_700: FakeResponse(content=font),
        }
    )


def test_parse_font_spec():
    assert parse_font_spec("Roboto:700") == ("Roboto", 700)
    assert parse_font_spec(" Open Sans ") == ("Open Sans", None)


def test_parse_font_spec_rejects_bad_weight():
    with pytest.raises(ValueError):
        parse_font_spec("Roboto:bold")


def test_parse_font_faces():
    assert parse_font_faces(SAMPLE_CSS) == [
        FontFace(400, ORBITRON_400, "truetype"),
        FontFace(700, ORBITRON_700, "truetype"),
    ]
    assert parse_font_faces("body { color: red; }") == []


def test_pick_face_prefers_closest_truetype_weight():
    faces = parse_font_faces(SAMPLE_CSS) + parse_font_faces(WOFF2_CSS)
    assert pick_face(faces, 700).url == ORBITRON_700
    assert pick_face(faces, 500).weight == 400
    assert pick_face(parse_font_faces(WOFF2_CSS), 400) is None


def test_cache_path_drops_spaces(tmp_path):
    assert GoogleFontCache(tmp_path, FakeSession({})).path_for("Open Sans", 700) == tmp_path / "OpenSans-700.ttf"


def test_fetch_downloads_and_caches(tmp_path):
    session = _session()
    cache = GoogleFontCache(tmp_path / "fonts", session)

    path = cache.fetch("Orbitron", 700)

    assert path == tmp_path / "fonts" / "Orbitron-700.ttf"
    assert path.read_bytes() == FAKE_TTF
    assert session.requests == [
        ("https://fonts.googleapis.com/css", {"family": "Orbitron:700"}),
        (ORBITRON_700, None),
    ]
    assert not list((tmp_path / "fonts").glob("*.part"))


def test_cached_font_skips_network(tmp_path):
    cached = tmp_path / "Orbitron-700.ttf"
    cached.write_bytes(FAKE_TTF)
    session = FakeSession({})

    assert GoogleFontCache(tmp_path, session).fetch("Orbitron", 700) == cached
    assert session.requests == []


def test_non_font_payload_is_not_cached(tmp_path):
    cache = GoogleFontCache(tmp_path, _session(font=b"<html>quota exceeded</html>"))

    with pytest.raises(FontLoadError):
        cache.fetch("Orbitron", 400)

    assert list(tmp_path.iterdir()) == []


def test_family_without_truetype_source(tmp_path):
    with pytest.raises(FontLoadError):
        GoogleFontCache(tmp_path, _session(css=WOFF2_CSS)).fetch("Orbitron", 400)


@pytest.mark.parametrize(
    "failure",
    [FakeResponse(status=400), requests.ConnectionError("offline")],
)
def test_request_failures_become_font_load_errors(tmp_path, failure):
    session = FakeSession({"https://fonts.googleapis.com/css": failure})

    with pytest.raises(FontLoadError):
        GoogleFontCache(tmp_path, session).fetch("Nope", 400)


def test_resolve_existing_file(truetype_font_path):
    assert resolve_font_path(str(truetype_font_path)) == truetype_font_path


def test_resolve_missing_file_returns_none(tmp_path):
    assert resolve_font_path(str(tmp_path / "missing.ttf")) is None


def test_resolve_google_spec_uses_downloader(tmp_path, monkeypatch):
    calls = []

    def fake_download(family, weight, cache_dir=None):
        calls.append((family, weight))
        return tmp_path / "Roboto-400.ttf"

    monkeypatch.setattr(fonts, "get_google_font", fake_download)

    assert resolve_font_path("Roboto:400") == tmp_path / "Roboto-400.ttf"
    assert calls == [("Roboto", 400)]


def test_load_font_from_path(truetype_font_path):
    font = load_font(str(truetype_font_path))
    assert font.glyph_id("A") > 0


def test_load_font_unresolvable(tmp_path):
    with pytest.raises(FontLoadError):
        load_font(str(tmp_path / "missing.ttf"))

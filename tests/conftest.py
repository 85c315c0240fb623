"""Shared pytest fixtures."""

import shutil
from pathlib import Path

import pytest
import requests
from fontTools.fontBuilder import FontBuilder
from fontTools.pens.ttGlyphPen import TTGlyphPen

from ableton_fonts.config.paths import fonts_dir_for
from ableton_fonts.config.slots import FONT_SLOTS


def build_font(
    path: Path,
    family: str = "Test Sans",
    style: str = "Regular",
    units_per_em: int = 1000,
) -> Path:
    """Write a small TrueType font with a simple and a composite glyph."""
    pen = TTGlyphPen(None)
    pen.moveTo((50, 0))
    pen.lineTo((300, 700))
    pen.lineTo((550, 0))
    pen.closePath()
    glyph_a = pen.glyph()

    pen = TTGlyphPen({"A": glyph_a})
    pen.addComponent("A", (1, 0, 0, 1, 0, 150))
    glyph_a_ring = pen.glyph()

    fb = FontBuilder(units_per_em, isTTF=True)
    fb.setupGlyphOrder([".notdef", "A", "Aring"])
    fb.setupCharacterMap({0x41: "A", 0xC5: "Aring"})
    fb.setupGlyf({".notdef": TTGlyphPen(None).glyph(), "A": glyph_a, "Aring": glyph_a_ring})
    fb.setupHorizontalMetrics({".notdef": (500, 0), "A": (600, 50), "Aring": (600, 50)})
    fb.setupHorizontalHeader(ascent=800, descent=-200)
    fb.setupNameTable(
        {
            "familyName": family,
            "styleName": style,
            "uniqueFontIdentifier": f"1.000;TEST;{family}-{style}",
            "version": "Version 1.000",
            "fullName": f"{family} {style}",
            "psName": f"{family}-{style}".replace(" ", ""),
            "typographicFamily": family,
            "typographicSubfamily": style,
        }
    )
    fb.setupOS2(
        sTypoAscender=800,
        sTypoDescender=-200,
        sTypoLineGap=100,
        usWinAscent=900,
        usWinDescent=250,
        sxHeight=500,
        sCapHeight=700,
    )
    fb.setupPost(underlinePosition=-100, underlineThickness=50)

    path.parent.mkdir(parents=True, exist_ok=True)
    fb.save(str(path))
    return path


class FakeSystem:
    """SystemFacade that records calls instead of shelling out."""

    def __init__(self, app: Path | None = None, signed: bool = True):
        self.app = app
        self.signed = signed
        self.calls: list[tuple] = []
        self.refuse: set[str] = set()

    def locate_application(self):
        self.calls.append(("locate_application",))
        return self.app

    def copy_privileged(self, src, dst):
        from ableton_fonts.core.errors import InstallPermissionError

        if dst.name in self.refuse:
            raise InstallPermissionError(f"sudo refused for {dst.name}")
        self.calls.append(("copy_privileged", dst.name))
        shutil.copy2(src, dst)

    def has_signature(self, bundle):
        return self.signed

    def strip_signature(self, bundle):
        self.calls.append(("strip_signature", bundle))

    def ad_hoc_sign(self, bundle):
        self.calls.append(("ad_hoc_sign", bundle))

    def clear_quarantine(self, bundle):
        self.calls.append(("clear_quarantine", bundle))

    def called(self, name: str) -> list[tuple]:
        return [call for call in self.calls if call[0] == name]


class FakeResponse:
    """Minimal stand-in for requests.Response."""

    def __init__(self, content: bytes, status_code: int = 200):
        self.content = content
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")


@pytest.fixture
def temp_font_dir(tmp_path):
    """Create a temporary directory for font testing."""
    return tmp_path / "fonts"


@pytest.fixture
def make_font(temp_font_dir):
    """Factory writing test fonts, by default into temp_font_dir."""

    def _make(name="Test-Regular.ttf", **kwargs):
        path = Path(name) if Path(name).is_absolute() else temp_font_dir / name
        return build_font(path, **kwargs)

    return _make


@pytest.fixture
def source_font(make_font):
    """A replacement font with unitsPerEm 1000."""
    return make_font("Replacement-Regular.ttf", family="Replacement Sans")


@pytest.fixture
def ableton_app(tmp_path, make_font):
    """A fake Ableton Live bundle holding the four original slot fonts."""
    bundle = tmp_path / "Applications" / "Ableton Live 12 Suite.app"
    fonts_dir = fonts_dir_for(bundle)
    for slot in FONT_SLOTS:
        make_font(fonts_dir / slot.filename, family=slot.family, style=slot.subfamily)
    return bundle


@pytest.fixture
def fonts_dir(ableton_app):
    return fonts_dir_for(ableton_app)


@pytest.fixture
def original_bytes(fonts_dir):
    """Slot font contents before any modification."""
    return {slot.filename: (fonts_dir / slot.filename).read_bytes() for slot in FONT_SLOTS}


@pytest.fixture
def fake_system(ableton_app):
    return FakeSystem(app=ableton_app)


@pytest.fixture
def backup_root(tmp_path):
    return tmp_path / "backups"


@pytest.fixture
def fake_downloads(monkeypatch, make_font):
    """Serve a generated font for every download URL; returns requested URLs."""
    content = make_font("Downloaded.ttf", family="Atkinson Hyperlegible").read_bytes()
    requested: list[str] = []

    def fake_get(url, timeout=None):
        requested.append(url)
        return FakeResponse(content)

    monkeypatch.setattr("ableton_fonts.operations.download.requests.get", fake_get)
    return requested


@pytest.fixture
def response_factory():
    """Build fake requests responses: response_factory(content, status_code)."""
    return FakeResponse

"""Tests for replacement font acquisition."""

import pytest
import requests

from ableton_fonts.config.slots import ATKINSON_DOWNLOADS, Style
from ableton_fonts.core.errors import (
    AppEnvironmentError,
    DownloadError,
    FontFormatError,
    SlotMappingError,
)
from ableton_fonts.operations.download import GlyphSet, download_atkinson


def test_download_atkinson(fake_downloads, tmp_path):
    """Test all four styles are fetched into the scratch directory."""
    glyph_set = download_atkinson(tmp_path / "download")

    assert fake_downloads == [item.url for item in ATKINSON_DOWNLOADS]
    assert set(glyph_set.files) == set(Style)
    assert glyph_set.path_for(Style.BOLD).name == "AtkinsonHyperlegible-Bold.ttf"
    assert glyph_set.path_for(Style.BOLD).stat().st_size > 0


def test_download_atkinson_any_failure_aborts(monkeypatch, tmp_path, response_factory):
    """Test one failed style aborts the whole download."""
    def fake_get(url, timeout=None):
        if url.endswith("Italic.ttf"):
            return response_factory(b"", status_code=404)
        return response_factory(b"font")

    monkeypatch.setattr("ableton_fonts.operations.download.requests.get", fake_get)

    with pytest.raises(DownloadError, match="AtkinsonHyperlegible-Italic.ttf"):
        download_atkinson(tmp_path / "download")


def test_download_network_error(monkeypatch, tmp_path):
    """Test connection errors become DownloadError."""

    def fake_get(url, timeout=None):
        raise requests.ConnectionError("no route to host")

    monkeypatch.setattr("ableton_fonts.operations.download.requests.get", fake_get)

    with pytest.raises(DownloadError):
        download_atkinson(tmp_path / "download")


def test_download_empty_body(monkeypatch, tmp_path, response_factory):
    """Test an empty response is treated as a failure."""
    monkeypatch.setattr(
        "ableton_fonts.operations.download.requests.get",
        lambda url, timeout=None: response_factory(b""),
    )

    with pytest.raises(DownloadError):
        download_atkinson(tmp_path / "download")


def test_glyph_set_from_single_file(source_font, tmp_path):
    """Test a custom font is staged once per style."""
    glyph_set = GlyphSet.from_single_file(source_font, tmp_path / "custom")

    assert set(glyph_set.files) == set(Style)
    for path in glyph_set.files.values():
        assert path.parent == tmp_path / "custom"
        assert path.read_bytes() == source_font.read_bytes()
    assert len(set(glyph_set.files.values())) == 4


def test_glyph_set_missing_custom_file(tmp_path):
    """Test a missing custom font raises FontFormatError."""
    with pytest.raises(FontFormatError):
        GlyphSet.from_single_file(tmp_path / "missing.ttf", tmp_path / "custom")


def test_glyph_set_missing_style(tmp_path):
    """Test a style without a file is a hard failure."""
    glyph_set = GlyphSet("Partial", {Style.REGULAR: tmp_path / "Regular.ttf"})
    with pytest.raises(SlotMappingError):
        glyph_set.path_for(Style.ITALIC)


def test_glyph_set_unwritable_scratch(source_font, tmp_path):
    """Test a scratch path that cannot be created raises AppEnvironmentError."""
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")

    with pytest.raises(AppEnvironmentError):
        GlyphSet.from_single_file(source_font, blocker / "custom")
